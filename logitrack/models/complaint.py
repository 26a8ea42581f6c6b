"""
Client complaint model
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SQLEnum
from datetime import datetime
from enum import Enum
from logitrack.database import Base


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    CLOSED = "closed"


class ComplaintPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Complaint(Base):
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    shipment_id = Column(Integer, ForeignKey("shipments.id"), nullable=True)

    subject = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    status = Column(
        SQLEnum(ComplaintStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ComplaintStatus.PENDING,
    )
    priority = Column(
        SQLEnum(ComplaintPriority, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ComplaintPriority.MEDIUM,
    )
    assigned_to = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
