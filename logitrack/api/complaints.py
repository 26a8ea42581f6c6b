"""
Complaints API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from logitrack.models.user import User
from logitrack.models.complaint import ComplaintPriority, ComplaintStatus
from logitrack.api.auth import require
from logitrack.services.permissions import Action
from logitrack.services.storage import ComplaintFilter, Storage, get_storage
from logitrack.utils.helpers import update_values

router = APIRouter()

# Columns that cannot be cleared with an explicit null
NOT_NULL_FIELDS = ("subject", "description", "status", "priority")


class ComplaintResponse(BaseModel):
    id: int
    client_id: int
    shipment_id: Optional[int]
    subject: str
    description: str
    status: ComplaintStatus
    priority: ComplaintPriority
    assigned_to: Optional[int]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ComplaintCreate(BaseModel):
    client_id: int
    shipment_id: Optional[int] = None
    subject: str
    description: str
    status: ComplaintStatus = ComplaintStatus.PENDING
    priority: ComplaintPriority = ComplaintPriority.MEDIUM
    assigned_to: Optional[int] = None


class ComplaintUpdate(BaseModel):
    shipment_id: Optional[int] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ComplaintStatus] = None
    priority: Optional[ComplaintPriority] = None
    assigned_to: Optional[int] = None


async def _check_references(storage: Storage, values: dict) -> None:
    if values.get("client_id") is not None and not await storage.get_client(values["client_id"]):
        raise HTTPException(status_code=400, detail="Client does not exist")
    if values.get("shipment_id") is not None and not await storage.get_shipment(values["shipment_id"]):
        raise HTTPException(status_code=400, detail="Shipment does not exist")
    if values.get("assigned_to") is not None and not await storage.get_user(values["assigned_to"]):
        raise HTTPException(status_code=400, detail="Assignee does not exist")


@router.get("/", response_model=List[ComplaintResponse])
async def list_complaints(
    status: Optional[ComplaintStatus] = None,
    priority: Optional[ComplaintPriority] = None,
    client_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.COMPLAINT_READ))
):
    """List complaints with filters, newest first"""
    return await storage.list_complaints(ComplaintFilter(
        status=status,
        priority=priority,
        client_id=client_id,
        assigned_to=assigned_to,
    ))


@router.get("/{complaint_id}", response_model=ComplaintResponse)
async def get_complaint(
    complaint_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.COMPLAINT_READ))
):
    complaint = await storage.get_complaint(complaint_id)
    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")
    return complaint


@router.post("/", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
async def create_complaint(
    data: ComplaintCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.COMPLAINT_CREATE))
):
    values = data.model_dump()
    await _check_references(storage, values)
    return await storage.create_complaint(values)


@router.put("/{complaint_id}", response_model=ComplaintResponse)
async def update_complaint(
    complaint_id: int,
    data: ComplaintUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.COMPLAINT_WRITE))
):
    complaint = await storage.get_complaint(complaint_id)
    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")

    updates = update_values(data, NOT_NULL_FIELDS)
    await _check_references(storage, updates)
    return await storage.update_complaint(complaint, updates)


@router.delete("/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_complaint(
    complaint_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.COMPLAINT_WRITE))
):
    complaint = await storage.get_complaint(complaint_id)
    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")
    await storage.delete_complaint(complaint)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
