"""
Clients API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr

from logitrack.models.user import User
from logitrack.api.auth import require
from logitrack.services.permissions import Action
from logitrack.services.storage import ClientFilter, Storage, get_storage
from logitrack.utils.helpers import update_values

router = APIRouter()

# Columns that cannot be cleared with an explicit null
NOT_NULL_FIELDS = ("name", "email")


class ClientResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str]
    address: Optional[str]
    country: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    country: Optional[str] = None


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    country: Optional[str] = None


@router.get("/", response_model=List[ClientResponse])
async def list_clients(
    country: Optional[str] = None,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.CLIENT_READ))
):
    """List clients, optionally by country"""
    return await storage.list_clients(ClientFilter(country=country))


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.CLIENT_READ))
):
    client = await storage.get_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    data: ClientCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.CLIENT_WRITE))
):
    return await storage.create_client(data.model_dump())


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.CLIENT_WRITE))
):
    client = await storage.get_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return await storage.update_client(client, update_values(data, NOT_NULL_FIELDS))


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.CLIENT_WRITE))
):
    client = await storage.get_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    dependents = await storage.client_dependents(client)
    if dependents:
        raise HTTPException(status_code=400, detail=f"Client has {', '.join(dependents)}")
    await storage.delete_client(client)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
