"""
Shipments API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from logitrack.models.user import User
from logitrack.models.shipment import ShipmentStatus
from logitrack.api.auth import require
from logitrack.services.permissions import Action
from logitrack.services.storage import ShipmentFilter, Storage, TrackingIdExhausted, get_storage
from logitrack.utils.helpers import update_values
from logitrack.utils.validators import Amount, UTCDateTime

router = APIRouter()

# Columns that cannot be cleared with an explicit null
NOT_NULL_FIELDS = ("origin", "destination", "client_id", "due_date", "status")


# --- Pydantic Schemas ---

class ShipmentResponse(BaseModel):
    id: int
    tracking_id: str
    origin: str
    destination: str
    client_id: int
    shipper_id: Optional[int]
    due_date: datetime
    status: ShipmentStatus
    value: Optional[int]
    weight: Optional[int]
    description: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ShipmentCreate(BaseModel):
    origin: str
    destination: str
    client_id: int
    shipper_id: Optional[int] = None
    due_date: UTCDateTime
    status: ShipmentStatus = ShipmentStatus.PENDING
    value: Optional[Amount] = None
    weight: Optional[int] = None
    description: Optional[str] = None


class ShipmentUpdate(BaseModel):
    origin: Optional[str] = None
    destination: Optional[str] = None
    client_id: Optional[int] = None
    shipper_id: Optional[int] = None
    due_date: Optional[UTCDateTime] = None
    status: Optional[ShipmentStatus] = None
    value: Optional[Amount] = None
    weight: Optional[int] = None
    description: Optional[str] = None


# --- Helper ---

async def _check_references(storage: Storage, client_id: Optional[int], shipper_id: Optional[int]) -> None:
    if client_id is not None and not await storage.get_client(client_id):
        raise HTTPException(status_code=400, detail="Client does not exist")
    if shipper_id is not None and not await storage.get_user(shipper_id):
        raise HTTPException(status_code=400, detail="Shipper does not exist")


# --- Endpoints ---

@router.get("/", response_model=List[ShipmentResponse])
async def list_shipments(
    status: Optional[ShipmentStatus] = None,
    client_id: Optional[int] = None,
    shipper_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.SHIPMENT_READ))
):
    """List shipments ordered by due date"""
    return await storage.list_shipments(
        ShipmentFilter(status=status, client_id=client_id, shipper_id=shipper_id)
    )


@router.get("/tracking/{tracking_id}", response_model=ShipmentResponse)
async def get_shipment_by_tracking_id(
    tracking_id: str,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.SHIPMENT_READ))
):
    shipment = await storage.get_shipment_by_tracking_id(tracking_id)
    if not shipment:
        raise HTTPException(status_code=404, detail="Shipment not found")
    return shipment


@router.get("/{shipment_id}", response_model=ShipmentResponse)
async def get_shipment(
    shipment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.SHIPMENT_READ))
):
    shipment = await storage.get_shipment(shipment_id)
    if not shipment:
        raise HTTPException(status_code=404, detail="Shipment not found")
    return shipment


@router.post("/", response_model=ShipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_shipment(
    data: ShipmentCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.SHIPMENT_WRITE))
):
    """Create a shipment; the tracking id is generated"""
    await _check_references(storage, data.client_id, data.shipper_id)
    try:
        return await storage.create_shipment(data.model_dump())
    except TrackingIdExhausted:
        raise HTTPException(status_code=503, detail="Could not allocate a tracking id, try again")


@router.put("/{shipment_id}", response_model=ShipmentResponse)
async def update_shipment(
    shipment_id: int,
    data: ShipmentUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.SHIPMENT_WRITE))
):
    shipment = await storage.get_shipment(shipment_id)
    if not shipment:
        raise HTTPException(status_code=404, detail="Shipment not found")

    updates = update_values(data, NOT_NULL_FIELDS)
    await _check_references(storage, updates.get("client_id"), updates.get("shipper_id"))
    return await storage.update_shipment(shipment, updates)


@router.delete("/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shipment(
    shipment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.SHIPMENT_WRITE))
):
    shipment = await storage.get_shipment(shipment_id)
    if not shipment:
        raise HTTPException(status_code=404, detail="Shipment not found")
    dependents = await storage.shipment_dependents(shipment)
    if dependents:
        raise HTTPException(status_code=400, detail=f"Shipment has {', '.join(dependents)}")
    await storage.delete_shipment(shipment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
