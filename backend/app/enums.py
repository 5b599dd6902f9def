from enum import Enum

class UserRole(str, Enum):
    USER = "user"
    BUSINESS_OWNER = "business_owner"
    ADMIN = "admin"

class ApprovalState(str, Enum):
    """Derived from Business.is_approved; rejection returns a business to PENDING."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"

    @classmethod
    def from_flag(cls, is_approved: bool) -> "ApprovalState":
        return cls.APPROVED if is_approved else cls.PENDING

class BusinessAction(str, Enum):
    SUBMIT = "submit"
    VIEW = "view"
    EDIT = "edit"
    REMOVE = "remove"
    SET_APPROVAL = "set_approval"
    LIST_APPROVED = "list_approved"
    LIST_ALL = "list_all"
    MANAGE_TAXONOMY = "manage_taxonomy"

class ImageType(str, Enum):
    JPG = "JPG"
    PNG = "PNG"
    GIF = "GIF"
