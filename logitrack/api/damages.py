"""
Damage report API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from logitrack.models.user import User
from logitrack.models.damage import DamageStatus
from logitrack.api.auth import require
from logitrack.services.permissions import Action
from logitrack.services.storage import DamageFilter, Storage, get_storage
from logitrack.utils.helpers import update_values
from logitrack.utils.validators import Amount, UTCDateTime

router = APIRouter()

# Columns that cannot be cleared with an explicit null
NOT_NULL_FIELDS = ("description", "status", "damage_date")


class DamageResponse(BaseModel):
    id: int
    shipment_id: int
    description: str
    reported_by: int
    status: DamageStatus
    damage_date: datetime
    claim_amount: Optional[int]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class DamageCreate(BaseModel):
    shipment_id: int
    description: str
    reported_by: Optional[int] = None
    status: DamageStatus = DamageStatus.PENDING
    damage_date: UTCDateTime
    claim_amount: Optional[Amount] = None


class DamageUpdate(BaseModel):
    description: Optional[str] = None
    status: Optional[DamageStatus] = None
    damage_date: Optional[UTCDateTime] = None
    claim_amount: Optional[Amount] = None


@router.get("/", response_model=List[DamageResponse])
async def list_damages(
    status: Optional[DamageStatus] = None,
    shipment_id: Optional[int] = None,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.DAMAGE_READ))
):
    """List damage reports, most recent damage first"""
    return await storage.list_damages(DamageFilter(status=status, shipment_id=shipment_id))


@router.get("/{damage_id}", response_model=DamageResponse)
async def get_damage(
    damage_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.DAMAGE_READ))
):
    damage = await storage.get_damage(damage_id)
    if not damage:
        raise HTTPException(status_code=404, detail="Damage report not found")
    return damage


@router.post("/", response_model=DamageResponse, status_code=status.HTTP_201_CREATED)
async def create_damage(
    data: DamageCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.DAMAGE_CREATE))
):
    """Report damage on a shipment; the reporter defaults to the caller"""
    if not await storage.get_shipment(data.shipment_id):
        raise HTTPException(status_code=400, detail="Shipment does not exist")

    values = data.model_dump()
    if values["reported_by"] is None:
        values["reported_by"] = current_user.id
    elif not await storage.get_user(values["reported_by"]):
        raise HTTPException(status_code=400, detail="Reporter does not exist")

    return await storage.create_damage(values)


@router.put("/{damage_id}", response_model=DamageResponse)
async def update_damage(
    damage_id: int,
    data: DamageUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.DAMAGE_WRITE))
):
    """Update a damage report (e.g. move it through review)"""
    damage = await storage.get_damage(damage_id)
    if not damage:
        raise HTTPException(status_code=404, detail="Damage report not found")
    return await storage.update_damage(damage, update_values(data, NOT_NULL_FIELDS))


@router.delete("/{damage_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_damage(
    damage_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.DAMAGE_WRITE))
):
    damage = await storage.get_damage(damage_id)
    if not damage:
        raise HTTPException(status_code=404, detail="Damage report not found")
    await storage.delete_damage(damage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
