"""
User model for authentication and workflow roles.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from autotrack.core.database import Base

ROLES = ("employee", "hod", "finance", "admin")
SUBROLES = ("apa", "am")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)
    role = Column(String(50), nullable=False, default='employee')  # 'employee', 'hod', 'finance' or 'admin'
    subrole = Column(String(20), nullable=True)  # 'apa' or 'am' for finance users, NULL otherwise
    department = Column(String(100), nullable=False, default='Unassigned', index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def is_admin(self) -> bool:
        return self.role == 'admin'
