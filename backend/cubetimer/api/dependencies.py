"""Route Dependencies — repositories bound to the request's database session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cubetimer.infrastructure.database import get_db
from cubetimer.services.solve_repository import (
    SqlCustomEventRepository, SqlSolveRepository,
)


async def get_solve_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlSolveRepository:
    return SqlSolveRepository(db)


async def get_custom_event_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlCustomEventRepository:
    return SqlCustomEventRepository(db)
