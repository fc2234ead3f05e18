from fastapi import APIRouter, Depends
from aish.database import Database, get_database
from aish.schemas.case import CaseStats
from aish.services.case_service import case_service

router = APIRouter()


@router.get("/stats", response_model=CaseStats)
async def get_stats(database: Database = Depends(get_database)):
    """Total, Active, Recovered and high-severity counts, queried concurrently."""
    return await case_service.stats(database)
