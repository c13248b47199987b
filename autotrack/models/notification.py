"""
In-app notification model.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from autotrack.core.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    message = Column(Text, nullable=False)
    kind = Column(String(50), nullable=False, default='info')  # 'submitted', 'approved', 'declined', 'paid', 'renewal_alert'
    subscription_id = Column(Integer, ForeignKey('subscriptions.id'), nullable=True, index=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
