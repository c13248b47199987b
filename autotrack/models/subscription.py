"""
Subscription request model.

One row per request. Renewals insert a new row linked through renewal_of_id,
so approval and payment history of earlier requests is never rewritten.
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from autotrack.core.database import Base


class SubscriptionStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED_BY_HOD = "Approved by HOD"
    DECLINED_BY_HOD = "Declined by HOD"
    APPROVED_BY_APA = "Approved by APA"
    DECLINED_BY_APA = "Declined by APA"
    ACTIVE = "Active"
    EXPIRED = "Expired"  # Derived at read time, never stored


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    tool_name = Column(String(255), nullable=False)
    vendor_name = Column(String(255), nullable=True)
    department = Column(String(100), nullable=False, index=True)
    purpose = Column(Text, nullable=False)
    cost = Column(Numeric(12, 2), nullable=False)
    duration_months = Column(Integer, nullable=False)
    alert_days = Column(Integer, nullable=True, default=10)  # NULL on legacy rows, read back as 10
    invoice_url = Column(String(500), nullable=True)

    status = Column(String(50), nullable=False, default=SubscriptionStatus.PENDING.value, index=True)
    remarks = Column(Text, nullable=True)
    request_date = Column(DateTime(timezone=True), nullable=False)
    approval_date = Column(DateTime(timezone=True), nullable=True)
    apa_approval_date = Column(DateTime(timezone=True), nullable=True)
    payment_date = Column(DateTime(timezone=True), nullable=True)
    expiry_date = Column(DateTime(timezone=True), nullable=True, index=True)
    payment_mode = Column(String(50), nullable=True)
    transaction_id = Column(String(255), nullable=True)

    requested_by = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    approved_by = Column(Integer, ForeignKey('users.id'), nullable=True)  # HOD
    apa_approved_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    paid_by = Column(Integer, ForeignKey('users.id'), nullable=True)  # AM

    renewal_of_id = Column(Integer, ForeignKey('subscriptions.id'), nullable=True, index=True)
    version = Column(Integer, nullable=False, default=1)  # Bumped on every transition (CAS guard)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    requester = relationship("User", foreign_keys=[requested_by])
    renewal_of = relationship("Subscription", remote_side=[id])
