"""
Authentication - password hashing, session tokens, current-user and policy dependencies
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from passlib.context import CryptContext
from pydantic import BaseModel, EmailStr, field_validator

from logitrack.config import get_settings
from logitrack.models.user import User, UserRole
from logitrack.services.permissions import Action, is_allowed
from logitrack.services.storage import Storage, get_storage
from logitrack.utils.logger import get_logger
from logitrack.utils.validators import validate_password

settings = get_settings()
logger = get_logger(__name__)

router = APIRouter()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# --- Pydantic Schemas ---

class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    role: UserRole
    company: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class RegisterRequest(BaseModel):
    username: str
    email: EmailStr
    full_name: str
    password: str
    company: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password(v)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# --- Passwords & tokens ---

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


async def authenticate_user(storage: Storage, login: str, password: str) -> Optional[User]:
    """Look the user up by username, falling back to email"""
    user = await storage.get_user_by_username(login)
    if user is None:
        user = await storage.get_user_by_email(login)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


# --- Dependencies ---

async def get_current_user(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    storage: Storage = Depends(get_storage),
) -> User:
    """Resolve the caller from the session cookie or a bearer token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token = bearer_token or request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise credentials_exception
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = int(payload.get("sub"))
    except (jwt.InvalidTokenError, TypeError, ValueError):
        raise credentials_exception

    user = await storage.get_user(user_id)
    if user is None:
        raise credentials_exception
    return user


def require(action: Action):
    """Dependency factory: the current user, if their role may perform ``action``"""
    async def _dep(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, action):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return _dep


# --- Endpoints ---

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    """Self-service sign-up; always creates an employee and starts a session"""
    if await storage.get_user_by_username(data.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    if await storage.get_user_by_email(data.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    user = await storage.create_user({
        **data.model_dump(exclude={"password"}),
        "hashed_password": get_password_hash(data.password),
        "role": UserRole.EMPLOYEE,
    })
    _set_session_cookie(response, create_access_token(data={"sub": str(user.id)}))
    logger.info(f"Registered user {user.username}")
    return user


@router.post("/login", response_model=LoginResponse)
async def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    storage: Storage = Depends(get_storage),
):
    user = await authenticate_user(storage, form_data.username, form_data.password)
    if not user:
        logger.info(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(data={"sub": str(user.id)})
    _set_session_cookie(response, token)
    logger.info(f"User {user.username} logged in")
    return LoginResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
