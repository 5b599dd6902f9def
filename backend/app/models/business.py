from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..db import Base
from ..enums import ApprovalState

class Business(Base):
    """
    A directory listing submitted by a user.

    ``is_approved`` is the only lifecycle state: a business appears in public
    listings iff it is true. ``owner_id`` is fixed at creation.
    """
    __tablename__ = "businesses"
    
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    image_url = Column(String(255), nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False, server_default=false(), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    owner = relationship("User", back_populates="businesses")
    category = relationship("Category", back_populates="businesses")
    location = relationship("Location", back_populates="businesses")

    @property
    def approval_state(self) -> ApprovalState:
        return ApprovalState.from_flag(bool(self.is_approved))
