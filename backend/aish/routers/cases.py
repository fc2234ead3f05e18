from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from aish.database import get_db
from aish.exceptions import ValidationError
from aish.schemas.case import CaseCreate, CaseUpdate, CaseResponse
from aish.services.case_service import case_service

router = APIRouter()


@router.get("", response_model=list[CaseResponse])
async def list_cases(db: AsyncSession = Depends(get_db)):
    return await case_service.list_cases(db)


@router.post("", response_model=CaseResponse, status_code=201)
async def create_case(data: CaseCreate, db: AsyncSession = Depends(get_db)):
    return await case_service.create_case(db, data)


@router.post("/sync")
async def sync_cases(body: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    """
    Bulk upload of cases recorded offline.
    Body: {"cases": [{...case fields, optional "_id"}, ...]}
    """
    items = body.get("cases") if isinstance(body, dict) else None
    if not isinstance(items, list):
        raise ValidationError("Invalid sync payload. Expected { cases: [...] }")
    return await case_service.sync_cases(db, items)


@router.get("/{case_id}", response_model=CaseResponse)
async def get_case(case_id: str, db: AsyncSession = Depends(get_db)):
    return await case_service.get_case(db, case_id)


@router.put("/{case_id}", response_model=CaseResponse)
async def update_case(case_id: str, data: CaseUpdate, db: AsyncSession = Depends(get_db)):
    return await case_service.update_case(db, case_id, data)


@router.delete("/{case_id}")
async def delete_case(case_id: str, db: AsyncSession = Depends(get_db)):
    deleted = await case_service.delete_case(db, case_id)
    return {"message": "Case deleted successfully", "deletedCase": deleted}
