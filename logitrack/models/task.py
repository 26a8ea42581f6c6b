"""
Task model - work items assigned between users, optionally tied to another record
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SQLEnum
from datetime import datetime
from enum import Enum
from logitrack.database import Base


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskType(str, Enum):
    SHIPMENT = "shipment"
    PAYMENT = "payment"
    DAMAGE = "damage"
    COMPLAINT = "complaint"
    REPORT = "report"
    CLIENT = "client"
    GENERAL = "general"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    assigned_to = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    assigned_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    priority = Column(
        SQLEnum(TaskPriority, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    type = Column(
        SQLEnum(TaskType, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TaskType.GENERAL,
    )

    # Id of the shipment/payment/... this task is about, per `type`
    related_id = Column(Integer, nullable=True)

    status = Column(
        SQLEnum(TaskStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    due_date = Column(DateTime, nullable=True)
    reminder_date = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    comments = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
