from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aish.auth import (
    DOCTOR_ROLE,
    MIN_PASSWORD_LENGTH,
    hash_password,
    normalize_doctor_name,
    verify_password,
)
from aish.config import Settings
from aish.database import store_errors
from aish.exceptions import ConflictError, DoctorNotFoundError, UnauthorizedError, ValidationError
from aish.models.user import User
from aish.observability.logging import get_logger

logger = get_logger(__name__)


def _credentials(name: Any, password: Any) -> tuple[str, str]:
    if not isinstance(name, str) or not name.strip() or not isinstance(password, str) or not password:
        raise ValidationError("Name and password are required")
    return name, password


class AuthService:
    async def list_doctors(self, db: AsyncSession) -> list[dict]:
        with store_errors("Failed to fetch doctors"):
            result = await db.execute(select(User.name).order_by(User.name))
            return [{"name": name} for name in result.scalars().all()]

    async def register(self, db: AsyncSession, name: Any, password: Any, settings: Settings) -> str:
        name, password = _credentials(name, password)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        name = normalize_doctor_name(name)
        with store_errors("Failed to register doctor"):
            existing = await db.scalar(select(User.id).where(User.name == name))
            if existing is not None:
                raise ConflictError("Doctor already registered")

            db.add(
                User(
                    name=name,
                    password_hash=hash_password(
                        password, settings.password_secret, settings.password_hash_iterations
                    ),
                    role=DOCTOR_ROLE,
                )
            )
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise ConflictError("Doctor already registered") from e

        logger.info("doctor_registered", name=name)
        return name

    async def login(self, db: AsyncSession, name: Any, password: Any, settings: Settings) -> User:
        name, password = _credentials(name, password)

        with store_errors("Failed to log in"):
            user = await self._find(db, name)
            if user is None:
                normalized = normalize_doctor_name(name)
                if normalized != name:
                    user = await self._find(db, normalized)

        if user is None:
            logger.info("login_failed", name=name, reason="unknown_doctor")
            raise DoctorNotFoundError("Doctor not found")
        if not verify_password(password, user.password_hash, settings.password_secret):
            logger.info("login_failed", name=user.name, reason="wrong_password")
            raise UnauthorizedError("Invalid password")
        return user

    async def _find(self, db: AsyncSession, name: str):
        return await db.scalar(select(User).where(User.name == name))


auth_service = AuthService()
