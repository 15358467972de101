"""Solves — retroactive penalty/comment edits and deletion.

Invariants:
    - Edits replace the stored record; statistics follow on the next read
    - Missing solve ids -> 404 (ResourceNotFoundError via global handler)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from cubetimer.api.dependencies import get_solve_repository
from cubetimer.core.domain_types import Penalty, SolveId
from cubetimer.schemas.solve import SolveResponse, SolveUpdate
from cubetimer.services import session_service
from cubetimer.services.solve_repository import SqlSolveRepository

router = APIRouter(prefix="/api/v1/solves", tags=["solves"])


@router.patch("/{solve_id}", response_model=SolveResponse)
async def update_solve(
    solve_id: UUID,
    body: SolveUpdate,
    repo: SqlSolveRepository = Depends(get_solve_repository),
):
    """Apply a penalty (+2 / DNF / none) or change the comment."""
    updated = await session_service.edit_solve(
        repo, SolveId(solve_id),
        penalty=Penalty(body.penalty) if body.penalty is not None else None,
        comment=body.comment,
    )
    return SolveResponse.from_solve(updated)


@router.delete("/{solve_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_solve(
    solve_id: UUID, repo: SqlSolveRepository = Depends(get_solve_repository),
):
    await session_service.delete_solve(repo, SolveId(solve_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
