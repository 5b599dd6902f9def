# Import and re-export all models so callers can use `from app import models`

# Import Base from db module
from ..db import Base

# Import all models from their individual files
from .user import User
from .category import Category
from .location import Location
from .business import Business

# Ensure all models are available at package level
__all__ = [
    "Base",
    "User",
    "Category",
    "Location",
    "Business",
]
