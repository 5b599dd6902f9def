import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from .core.settings import get_settings
from .exceptions import DirectoryError, directory_exception_handler, validation_exception_handler
from .routers import auth, businesses, categories, locations

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Local Business Directory API",
    description="Backend API for the local business directory",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(DirectoryError, directory_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    content = {
        "success": False,
        "detail": "Something went wrong!",
        "code": "INTERNAL_ERROR",
    }
    if settings.expose_error_details:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Include routers
app.include_router(auth.router)
app.include_router(businesses.router)
app.include_router(categories.router)
app.include_router(locations.router)

from .db import engine

@app.on_event("startup")
def check_database_connection():
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info(f"Database connected ({engine.dialect.name})")
    except Exception:
        # the API still starts; requests will surface the failure
        logger.exception("Database connection check failed")

@app.get("/health")
async def health_check():
    return {"status": "healthy", "message": "Local Business Directory API is running"}

@app.get("/")
async def root():
    return {"message": "Welcome to Local Business Directory API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
