"""
Payments API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from logitrack.models.user import User
from logitrack.models.payment import PaymentStatus
from logitrack.api.auth import require
from logitrack.services.permissions import Action
from logitrack.services.storage import PaymentFilter, Storage, get_storage
from logitrack.utils.helpers import update_values
from logitrack.utils.validators import Amount, UTCDateTime

router = APIRouter()

# Columns that cannot be cleared with an explicit null
NOT_NULL_FIELDS = ("shipment_id", "amount", "status", "due_date")


class PaymentResponse(BaseModel):
    id: int
    shipment_id: int
    amount: int
    status: PaymentStatus
    payment_method: Optional[str]
    payment_date: Optional[datetime]
    due_date: datetime
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class PaymentCreate(BaseModel):
    shipment_id: int
    amount: Amount
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[str] = None
    payment_date: Optional[UTCDateTime] = None
    due_date: UTCDateTime


class PaymentUpdate(BaseModel):
    shipment_id: Optional[int] = None
    amount: Optional[Amount] = None
    status: Optional[PaymentStatus] = None
    payment_method: Optional[str] = None
    payment_date: Optional[UTCDateTime] = None
    due_date: Optional[UTCDateTime] = None


@router.get("/", response_model=List[PaymentResponse])
async def list_payments(
    status: Optional[PaymentStatus] = None,
    shipment_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.PAYMENT_READ))
):
    """List payments ordered by due date"""
    return await storage.list_payments(PaymentFilter(status=status, shipment_id=shipment_id))


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.PAYMENT_READ))
):
    payment = await storage.get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.post("/", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    data: PaymentCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.PAYMENT_WRITE))
):
    if not await storage.get_shipment(data.shipment_id):
        raise HTTPException(status_code=400, detail="Shipment does not exist")
    return await storage.create_payment(data.model_dump())


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int,
    data: PaymentUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.PAYMENT_WRITE))
):
    payment = await storage.get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")

    updates = update_values(data, NOT_NULL_FIELDS)
    if "shipment_id" in updates and not await storage.get_shipment(updates["shipment_id"]):
        raise HTTPException(status_code=400, detail="Shipment does not exist")

    # Marking paid without a date records it as paid now
    if updates.get("status") == PaymentStatus.PAID and updates.get("payment_date", payment.payment_date) is None:
        updates["payment_date"] = datetime.utcnow()

    return await storage.update_payment(payment, updates)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.PAYMENT_WRITE))
):
    payment = await storage.get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    await storage.delete_payment(payment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
