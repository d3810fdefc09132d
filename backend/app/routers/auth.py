"""Authentication router"""
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
import logging

from app.database import get_db
from app.services.auth import AuthService
from app.exceptions import AuthenticationError
from app.models.broker import Broker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


# Request/Response Models
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class BrokerResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    broker: BrokerResponse


# Dependencies
async def get_current_broker(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> Broker:
    """Get the authenticated broker from the bearer token"""
    payload = AuthService.decode_token(token)
    if payload.get("type") != "access":
        raise AuthenticationError(message="Invalid token type")

    try:
        broker_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError(message="Invalid token")

    broker = await AuthService(db).get_broker_by_id(broker_id)

    if not broker:
        raise AuthenticationError(message="Broker not found")

    if not broker.is_active:
        raise AuthenticationError(message="Account is disabled")

    return broker


# Endpoints
@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Register a broker and sign them in"""
    broker = await AuthService(db).register_broker(
        name=request.name,
        email=request.email,
        password=request.password
    )
    logger.info(f"Registered broker {broker.id}")

    return TokenResponse(
        message="Registration successful.",
        access_token=AuthService.create_access_token(broker),
        broker=BrokerResponse.model_validate(broker)
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Login and get access token"""
    broker = await AuthService(db).authenticate_broker(request.email, request.password)

    return TokenResponse(
        message="Login successful.",
        access_token=AuthService.create_access_token(broker),
        broker=BrokerResponse.model_validate(broker)
    )


@router.get("/me", response_model=BrokerResponse)
async def get_me(current_broker: Broker = Depends(get_current_broker)):
    """Get current broker profile"""
    return BrokerResponse.model_validate(current_broker)
