from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.deps import get_current_user
from dealbies.models.user import User
from dealbies.schemas.votes import VoteIn, VoteOut
from dealbies.services.votes import VoteError, VoteTargetNotFound, toggle_vote

router = APIRouter(prefix="/api/votes", tags=["Votes"])


@router.post("", response_model=VoteOut)
async def cast_vote(
    payload: VoteIn,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> VoteOut:
    try:
        result = await toggle_vote(db, user=current_user, data=payload)
    except VoteTargetNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except VoteError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result["action"] == "created":
        response.status_code = 201
    return VoteOut(**result)
