from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.deps import get_current_user
from dealbies.models.user import User
from dealbies.schemas.comments import CommentCreate, CommentOut
from dealbies.services.comments import CommentError, CommentTargetNotFound, create_comment

router = APIRouter(prefix="/api/comments", tags=["Comments"])


@router.post("", response_model=CommentOut, status_code=201)
async def post_comment(
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return await create_comment(db, user=current_user, data=payload)
    except CommentTargetNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CommentError as e:
        raise HTTPException(status_code=400, detail=str(e))
