from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from aish.config import Settings, get_settings
from aish.database import get_db
from aish.schemas.auth import DoctorSummary, LoginResponse, RegisterResponse
from aish.services.auth_service import auth_service

router = APIRouter()


@router.get("/doctors", response_model=list[DoctorSummary])
async def list_doctors(db: AsyncSession = Depends(get_db)):
    """Names only, for the login dropdown. Password hashes never leave the store."""
    return await auth_service.list_doctors(db)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    body: dict,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Body: {"name": "Alice", "password": "secret1"}
    The stored name is trimmed and prefixed with "Dr." when missing.
    """
    name = await auth_service.register(db, body.get("name"), body.get("password"), settings)
    return RegisterResponse(message="Doctor registered successfully", name=name)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: dict,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = await auth_service.login(db, body.get("name"), body.get("password"), settings)
    return LoginResponse(message="Login successful", name=user.name, role=user.role)
