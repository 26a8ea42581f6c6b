"""
Damage report model
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum as SQLEnum
from datetime import datetime
from enum import Enum
from logitrack.database import Base


class DamageStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    APPROVED = "approved"
    REJECTED = "rejected"


class Damage(Base):
    """Damage reported against a shipment, optionally with a claim"""
    __tablename__ = "damages"

    id = Column(Integer, primary_key=True, index=True)
    shipment_id = Column(Integer, ForeignKey("shipments.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    reported_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(
        SQLEnum(DamageStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DamageStatus.PENDING,
    )
    damage_date = Column(DateTime, nullable=False)
    claim_amount = Column(Integer, nullable=True)  # minor currency units
    created_at = Column(DateTime, default=datetime.utcnow)
