"""
Storage - repository over one database session.

Handlers receive a ``Storage`` through ``get_storage`` instead of touching a
module-level store. Each ``list_*`` takes a typed filter whose set fields are
ANDed together as equality predicates.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Type

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from logitrack.config import get_settings
from logitrack.database import Base, get_db
from logitrack.models import (
    Client, Complaint, Damage, Payment, Shipment, Task, TaskStatus, User,
)
from logitrack.services.reporting import DashboardStats, compute_dashboard_stats
from logitrack.utils.helpers import generate_tracking_id, utcnow
from logitrack.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

TRACKING_ID_ATTEMPTS = 10


class TrackingIdExhausted(RuntimeError):
    """No free tracking id could be generated"""


# --- Filters ---

@dataclass
class _EqualityFilter:
    model = None

    def clauses(self) -> list:
        return [
            getattr(self.model, f.name) == getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        ]


@dataclass
class TaskFilter(_EqualityFilter):
    model = Task

    assigned_to: Optional[int] = None
    assigned_by: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    type: Optional[str] = None


@dataclass
class ShipmentFilter(_EqualityFilter):
    model = Shipment

    status: Optional[str] = None
    client_id: Optional[int] = None
    shipper_id: Optional[int] = None


@dataclass
class PaymentFilter(_EqualityFilter):
    model = Payment

    status: Optional[str] = None
    shipment_id: Optional[int] = None


@dataclass
class DamageFilter(_EqualityFilter):
    model = Damage

    status: Optional[str] = None
    shipment_id: Optional[int] = None
    reported_by: Optional[int] = None


@dataclass
class ComplaintFilter(_EqualityFilter):
    model = Complaint

    status: Optional[str] = None
    priority: Optional[str] = None
    client_id: Optional[int] = None
    shipment_id: Optional[int] = None
    assigned_to: Optional[int] = None


@dataclass
class ClientFilter(_EqualityFilter):
    model = Client

    country: Optional[str] = None
    email: Optional[str] = None


# --- Storage ---

class Storage:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, model: Type[Base], record_id: int):
        result = await self.db.execute(select(model).where(model.id == record_id))
        return result.scalar_one_or_none()

    async def _list(self, model: Type[Base], filter_: Optional[_EqualityFilter], *order_by) -> list:
        query = select(model)
        if filter_ is not None:
            query = query.where(*filter_.clauses())
        query = query.order_by(*(order_by or (model.id,)))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _create(self, obj):
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        logger.info(f"Created {type(obj).__name__} id={obj.id}")
        return obj

    async def _update(self, obj, data: Dict[str, Any]):
        for key, value in data.items():
            setattr(obj, key, value)
        if hasattr(obj, "updated_at"):
            obj.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def _exists(self, model: Type[Base], *clauses) -> bool:
        result = await self.db.execute(select(model.id).where(*clauses).limit(1))
        return result.first() is not None

    async def _referencing(self, checks) -> List[str]:
        return [label for label, model, clause in checks if await self._exists(model, clause)]

    async def _delete(self, obj) -> None:
        logger.info(f"Deleting {type(obj).__name__} id={obj.id}")
        await self.db.delete(obj)
        await self.db.commit()

    # Users

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self._get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_users(self) -> List[User]:
        return await self._list(User, None, User.created_at.desc(), User.id.desc())

    async def create_user(self, data: Dict[str, Any]) -> User:
        return await self._create(User(**data))

    async def update_user(self, user: User, data: Dict[str, Any]) -> User:
        return await self._update(user, data)

    async def delete_user(self, user: User) -> None:
        await self._delete(user)

    async def user_dependents(self, user: User) -> List[str]:
        """Records that must keep their reporter; other user references are nulled on delete"""
        return await self._referencing([
            ("damage reports", Damage, Damage.reported_by == user.id),
        ])

    # Clients

    async def get_client(self, client_id: int) -> Optional[Client]:
        return await self._get(Client, client_id)

    async def list_clients(self, filter_: Optional[ClientFilter] = None) -> List[Client]:
        return await self._list(Client, filter_, Client.name)

    async def create_client(self, data: Dict[str, Any]) -> Client:
        return await self._create(Client(**data))

    async def update_client(self, client: Client, data: Dict[str, Any]) -> Client:
        return await self._update(client, data)

    async def delete_client(self, client: Client) -> None:
        await self._delete(client)

    async def client_dependents(self, client: Client) -> List[str]:
        return await self._referencing([
            ("shipments", Shipment, Shipment.client_id == client.id),
            ("complaints", Complaint, Complaint.client_id == client.id),
        ])

    # Shipments

    async def get_shipment(self, shipment_id: int) -> Optional[Shipment]:
        return await self._get(Shipment, shipment_id)

    async def get_shipment_by_tracking_id(self, tracking_id: str) -> Optional[Shipment]:
        result = await self.db.execute(select(Shipment).where(Shipment.tracking_id == tracking_id))
        return result.scalar_one_or_none()

    async def list_shipments(self, filter_: Optional[ShipmentFilter] = None) -> List[Shipment]:
        return await self._list(Shipment, filter_, Shipment.due_date)

    async def _new_tracking_id(self) -> str:
        for _ in range(TRACKING_ID_ATTEMPTS):
            tracking_id = generate_tracking_id()
            if await self.get_shipment_by_tracking_id(tracking_id) is None:
                return tracking_id
        raise TrackingIdExhausted(f"No free tracking id after {TRACKING_ID_ATTEMPTS} attempts")

    async def create_shipment(self, data: Dict[str, Any]) -> Shipment:
        """Insert with a fresh tracking id; an id taken by a concurrent insert is regenerated"""
        for _ in range(TRACKING_ID_ATTEMPTS):
            tracking_id = await self._new_tracking_id()
            try:
                return await self._create(Shipment(**data, tracking_id=tracking_id))
            except IntegrityError:
                await self.db.rollback()
                if await self.get_shipment_by_tracking_id(tracking_id) is None:
                    raise
                logger.warning(f"Tracking id {tracking_id} taken concurrently, retrying")
        raise TrackingIdExhausted(f"No free tracking id after {TRACKING_ID_ATTEMPTS} attempts")

    async def update_shipment(self, shipment: Shipment, data: Dict[str, Any]) -> Shipment:
        return await self._update(shipment, data)

    async def delete_shipment(self, shipment: Shipment) -> None:
        await self._delete(shipment)

    async def shipment_dependents(self, shipment: Shipment) -> List[str]:
        return await self._referencing([
            ("payments", Payment, Payment.shipment_id == shipment.id),
            ("damage reports", Damage, Damage.shipment_id == shipment.id),
            ("complaints", Complaint, Complaint.shipment_id == shipment.id),
        ])

    # Payments

    async def get_payment(self, payment_id: int) -> Optional[Payment]:
        return await self._get(Payment, payment_id)

    async def list_payments(self, filter_: Optional[PaymentFilter] = None) -> List[Payment]:
        return await self._list(Payment, filter_, Payment.due_date)

    async def create_payment(self, data: Dict[str, Any]) -> Payment:
        return await self._create(Payment(**data))

    async def update_payment(self, payment: Payment, data: Dict[str, Any]) -> Payment:
        return await self._update(payment, data)

    async def delete_payment(self, payment: Payment) -> None:
        await self._delete(payment)

    # Damages

    async def get_damage(self, damage_id: int) -> Optional[Damage]:
        return await self._get(Damage, damage_id)

    async def list_damages(self, filter_: Optional[DamageFilter] = None) -> List[Damage]:
        return await self._list(Damage, filter_, Damage.damage_date.desc())

    async def create_damage(self, data: Dict[str, Any]) -> Damage:
        return await self._create(Damage(**data))

    async def update_damage(self, damage: Damage, data: Dict[str, Any]) -> Damage:
        return await self._update(damage, data)

    async def delete_damage(self, damage: Damage) -> None:
        await self._delete(damage)

    # Complaints

    async def get_complaint(self, complaint_id: int) -> Optional[Complaint]:
        return await self._get(Complaint, complaint_id)

    async def list_complaints(self, filter_: Optional[ComplaintFilter] = None) -> List[Complaint]:
        return await self._list(Complaint, filter_, Complaint.created_at.desc(), Complaint.id.desc())

    async def create_complaint(self, data: Dict[str, Any]) -> Complaint:
        return await self._create(Complaint(**data))

    async def update_complaint(self, complaint: Complaint, data: Dict[str, Any]) -> Complaint:
        return await self._update(complaint, data)

    async def delete_complaint(self, complaint: Complaint) -> None:
        await self._delete(complaint)

    # Tasks

    async def get_task(self, task_id: int) -> Optional[Task]:
        return await self._get(Task, task_id)

    async def list_tasks(self, filter_: Optional[TaskFilter] = None) -> List[Task]:
        return await self._list(Task, filter_, Task.id)

    async def create_task(self, data: Dict[str, Any]) -> Task:
        data = {k: v for k, v in data.items() if k != "completed_at"}
        task = Task(**data)
        if task.status == TaskStatus.COMPLETED:
            task.completed_at = utcnow()
        return await self._create(task)

    async def update_task(self, task: Task, data: Dict[str, Any]) -> Task:
        """Apply changes; stamp completed_at only on a transition into completed"""
        data = {k: v for k, v in data.items() if k != "completed_at"}
        new_status = data.get("status")
        if new_status == TaskStatus.COMPLETED and task.status != TaskStatus.COMPLETED:
            data["completed_at"] = utcnow()
        return await self._update(task, data)

    async def delete_task(self, task: Task) -> None:
        await self._delete(task)

    # Dashboard

    async def get_dashboard_stats(self, task_filter: Optional[TaskFilter] = None) -> DashboardStats:
        """Load the visible tasks and all users, then aggregate; load errors propagate"""
        tasks = await self.list_tasks(task_filter)
        users = await self.list_users()
        stats = compute_dashboard_stats(tasks, users, limit=settings.DASHBOARD_LIST_LIMIT)
        logger.debug(
            f"Dashboard stats: total={stats.counts.total} overdue={stats.counts.overdue}"
        )
        return stats


def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    """Dependency for getting a Storage bound to the request's session"""
    return Storage(db)
