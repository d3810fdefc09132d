"""Broker authentication service"""
from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.config import settings
from app.database import commit_or_raise
from app.models.broker import Broker
from app.exceptions import AuthenticationError, ConflictError, ValidationError


# Password hashing context
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash"""
    return pwd_context.hash(password)


def validate_password_strength(password: str) -> None:
    """Validate password meets requirements"""
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            message="Password does not meet requirements",
            details={"errors": [f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"]}
        )


class AuthService:
    """Authentication service for broker accounts"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def authenticate_broker(self, email: str, password: str) -> Broker:
        """Authenticate a broker by email and password"""
        broker = await self.get_broker_by_email(email)

        if not broker or not verify_password(password, broker.hashed_password):
            raise AuthenticationError(message="Invalid email or password.")

        if not broker.is_active:
            raise AuthenticationError(message="Account is disabled")

        broker.last_login = datetime.utcnow()
        await commit_or_raise(self.db, "Login failed.")

        return broker

    async def register_broker(self, name: str, email: str, password: str) -> Broker:
        """Create a new broker account"""
        validate_password_strength(password)

        if await self.get_broker_by_email(email):
            raise ConflictError(message="Email already registered.")

        broker = Broker(
            name=name,
            email=email.lower(),
            hashed_password=get_password_hash(password),
        )

        self.db.add(broker)
        await commit_or_raise(self.db, "Registration failed.")
        await self.db.refresh(broker)

        return broker

    async def get_broker_by_id(self, broker_id: int) -> Optional[Broker]:
        """Get broker by ID"""
        result = await self.db.execute(
            select(Broker).where(Broker.id == broker_id)
        )
        return result.scalar_one_or_none()

    async def get_broker_by_email(self, email: str) -> Optional[Broker]:
        """Get broker by email"""
        result = await self.db.execute(
            select(Broker).where(Broker.email == email.lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    def create_access_token(broker: Broker, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token for a broker"""
        expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode = {
            "sub": str(broker.id),
            "email": broker.email,
            "exp": expire,
            "type": "access",
        }
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> dict:
        """Decode and validate JWT token"""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise AuthenticationError(message="Invalid or expired token")
