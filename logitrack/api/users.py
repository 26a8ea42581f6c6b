"""
User administration endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List, Optional
from pydantic import BaseModel, EmailStr, field_validator

from logitrack.models.user import User, UserRole
from logitrack.api.auth import UserResponse, get_password_hash, require
from logitrack.services.permissions import Action
from logitrack.services.storage import Storage, get_storage
from logitrack.utils.helpers import update_values
from logitrack.utils.logger import get_logger
from logitrack.utils.validators import validate_password

logger = get_logger(__name__)

router = APIRouter()

# Password is optional on update, but null never clears it
NOT_NULL_FIELDS = ("email", "full_name", "password", "role")


class UserCreate(BaseModel):
    username: str
    email: EmailStr
    full_name: str
    password: str
    role: UserRole = UserRole.EMPLOYEE
    company: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password(v)


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None
    company: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return validate_password(v) if v is not None else v


@router.get("/", response_model=List[UserResponse])
async def list_users(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.USER_READ))
):
    """List users, newest first"""
    return await storage.list_users()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.USER_READ))
):
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.USER_WRITE))
):
    """Create a user with any role"""
    if await storage.get_user_by_username(data.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    if await storage.get_user_by_email(data.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    user = await storage.create_user({
        **data.model_dump(exclude={"password"}),
        "hashed_password": get_password_hash(data.password),
    })
    logger.info(f"{current_user.username} created user {user.username} ({user.role.value})")
    return user


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.USER_WRITE))
):
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    updates = update_values(data, NOT_NULL_FIELDS)
    if user.id == current_user.id and updates.get("role", user.role) != user.role:
        raise HTTPException(status_code=400, detail="You cannot change your own role")
    if "email" in updates and updates["email"] != user.email:
        if await storage.get_user_by_email(updates["email"]):
            raise HTTPException(status_code=400, detail="Email already registered")
    if "password" in updates:
        updates["hashed_password"] = get_password_hash(updates.pop("password"))

    return await storage.update_user(user, updates)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require(Action.USER_WRITE))
):
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    dependents = await storage.user_dependents(user)
    if dependents:
        raise HTTPException(status_code=400, detail=f"User has {', '.join(dependents)}")
    await storage.delete_user(user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
