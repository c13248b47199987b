"""
Audit log model for tracking workflow transitions.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from autotrack.core.database import Base


class AuditLog(Base):
    """One row per accepted status transition."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    action_type = Column(String(50), nullable=False, index=True)  # 'submit', 'renew', 'hod_approve', 'apa_decline', 'payment', etc.
    actor_user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    subscription_id = Column(Integer, ForeignKey('subscriptions.id'), nullable=False, index=True)
    from_status = Column(String(50), nullable=True)  # NULL for creations
    to_status = Column(String(50), nullable=False)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # Relationships
    actor = relationship("User", foreign_keys=[actor_user_id])
    subscription = relationship("Subscription", foreign_keys=[subscription_id])
