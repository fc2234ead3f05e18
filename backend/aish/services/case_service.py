import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aish.database import Database, store_errors
from aish.exceptions import NotFoundError, format_validation_errors
from aish.models.case import Case
from aish.observability.logging import get_logger
from aish.schemas.case import (
    CaseCreate,
    CaseResponse,
    CaseStats,
    CaseStatus,
    CaseSync,
    CaseUpdate,
    Severity,
    SyncError,
)

logger = get_logger(__name__)


def short_date(moment: datetime) -> str:
    """Month/day snapshot shown in case lists, e.g. "Oct 19"."""
    return f"{moment:%b} {moment.day}"


def build_case(data: CaseCreate, case_id: Optional[str] = None) -> Case:
    now = datetime.now(timezone.utc)
    fields = data.model_dump(exclude={"id", "date", "timestamp"})
    case = Case(
        **fields,
        date=data.date or short_date(now),
        timestamp=data.timestamp or now,
        synced=True,
    )
    if case_id:
        case.id = case_id
    return case


class CaseService:
    async def list_cases(self, db: AsyncSession) -> list[Case]:
        with store_errors("Failed to fetch cases"):
            result = await db.execute(select(Case).order_by(Case.timestamp.desc()))
            return list(result.scalars().all())

    async def get_case(self, db: AsyncSession, case_id: str) -> Case:
        with store_errors("Failed to fetch case"):
            case = await db.get(Case, case_id)
        if case is None:
            raise NotFoundError("Case not found")
        return case

    async def create_case(self, db: AsyncSession, data: CaseCreate) -> Case:
        with store_errors("Failed to create case"):
            case = build_case(data)
            db.add(case)
            await db.commit()
            await db.refresh(case)
        logger.info("case_created", case_id=case.id, name=case.name, location=case.location)
        return case

    async def update_case(self, db: AsyncSession, case_id: str, data: CaseUpdate) -> Case:
        case = await self.get_case(db, case_id)
        with store_errors("Failed to update case"):
            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(case, key, value)
            case.updated_at = datetime.now(timezone.utc)
            await db.commit()
            await db.refresh(case)
        logger.info("case_updated", case_id=case.id, name=case.name)
        return case

    async def delete_case(self, db: AsyncSession, case_id: str) -> CaseResponse:
        case = await self.get_case(db, case_id)
        deleted = CaseResponse.model_validate(case)
        with store_errors("Failed to delete case"):
            await db.delete(case)
            await db.commit()
        logger.info("case_deleted", case_id=deleted.id, name=deleted.name)
        return deleted

    async def sync_cases(self, db: AsyncSession, items: list[Any]) -> dict:
        """
        Reconcile an offline batch. Elements whose `_id` already exists are
        returned untouched; everything else is inserted. Failures are collected
        per element and never abort the batch.
        """
        saved: list[CaseResponse] = []
        errors: list[SyncError] = []

        for item in items:
            label = item.get("name") if isinstance(item, dict) else None
            if label is not None and not isinstance(label, str):
                label = str(label)
            try:
                data = CaseSync.model_validate(item)
            except PydanticValidationError as e:
                errors.append(SyncError(case=label, error=format_validation_errors(e.errors())))
                continue
            try:
                saved.append(await self._sync_one(db, data))
            except SQLAlchemyError as e:
                await db.rollback()
                logger.warning("case_sync_failed", name=label, error=str(e))
                errors.append(SyncError(case=label, error=str(e)))

        logger.info("cases_synced", synced=len(saved), errors=len(errors))
        result = {
            "message": f"Synced {len(saved)} cases successfully",
            "cases": saved,
        }
        if errors:
            result["errors"] = errors
        return result

    async def _sync_one(self, db: AsyncSession, data: CaseSync) -> CaseResponse:
        if data.id:
            existing = await db.get(Case, data.id)
            if existing is not None:
                return CaseResponse.model_validate(existing)

        case = build_case(data, case_id=data.id)
        db.add(case)
        try:
            await db.commit()
        except IntegrityError:
            # Another request inserted the same id first; the stored record wins.
            await db.rollback()
            if not data.id:
                raise
            existing = await db.get(Case, data.id)
            if existing is None:
                raise
            return CaseResponse.model_validate(existing)
        await db.refresh(case)
        return CaseResponse.model_validate(case)

    async def _count(self, database: Database, *criteria) -> int:
        query = select(func.count(Case.id))
        if criteria:
            query = query.where(*criteria)
        async with database.session() as session:
            return await session.scalar(query) or 0

    async def stats(self, database: Database) -> CaseStats:
        with store_errors("Failed to fetch stats"):
            total, active, recovered, critical = await asyncio.gather(
                self._count(database),
                self._count(database, Case.status == CaseStatus.ACTIVE.value),
                self._count(database, Case.status == CaseStatus.RECOVERED.value),
                self._count(database, Case.severity == Severity.HIGH.value),
            )
        return CaseStats(total=total, active=active, recovered=recovered, critical=critical)


case_service = CaseService()
