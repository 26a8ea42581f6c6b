from logitrack.models.user import User, UserRole
from logitrack.models.client import Client
from logitrack.models.shipment import Shipment, ShipmentStatus
from logitrack.models.payment import Payment, PaymentStatus
from logitrack.models.damage import Damage, DamageStatus
from logitrack.models.complaint import Complaint, ComplaintStatus, ComplaintPriority
from logitrack.models.task import Task, TaskStatus, TaskPriority, TaskType

__all__ = [
    "User",
    "UserRole",
    "Client",
    "Shipment",
    "ShipmentStatus",
    "Payment",
    "PaymentStatus",
    "Damage",
    "DamageStatus",
    "Complaint",
    "ComplaintStatus",
    "ComplaintPriority",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskType",
]
