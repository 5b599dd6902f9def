from typing import Optional
from fastapi import Depends

# Re-export database dependency
from .db import get_db

# Re-export authentication dependencies
from .auth import get_current_user, get_optional_user

# Re-export image storage dependency
from .services.image_storage import get_image_storage

from . import models
from .policies import Actor, ANONYMOUS


def get_current_actor(user: models.User = Depends(get_current_user)) -> Actor:
    """Authenticated caller as an Actor; 401 without a valid token"""
    return Actor.from_user(user)


def get_optional_actor(user: Optional[models.User] = Depends(get_optional_user)) -> Actor:
    """Caller as an Actor, or ANONYMOUS when no token was sent"""
    if user is None:
        return ANONYMOUS
    return Actor.from_user(user)
