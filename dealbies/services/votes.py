from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.logger import get_logger
from dealbies.models.comment import Comment
from dealbies.models.coupon import Coupon
from dealbies.models.deal import Deal
from dealbies.models.user import User
from dealbies.models.vote import Vote
from dealbies.schemas.votes import VoteIn
from dealbies.services.scoring import compute_score

logger = get_logger("votes")


class VoteError(Exception):
    pass


class VoteTargetNotFound(VoteError):
    pass


def _target(data: VoteIn) -> tuple[str, str, type]:
    if data.deal_id:
        return "deal_id", data.deal_id, Deal
    if data.coupon_id:
        return "coupon_id", data.coupon_id, Coupon
    return "comment_id", data.comment_id, Comment


async def _existing_vote(db: AsyncSession, user_id: str, column: str, target_id: str) -> Vote | None:
    res = await db.execute(
        select(Vote).where(Vote.user_id == user_id, getattr(Vote, column) == target_id)
    )
    return res.scalars().first()


async def _score(db: AsyncSession, column: str, target_id: str) -> int:
    res = await db.execute(select(Vote).where(getattr(Vote, column) == target_id))
    return compute_score(res.scalars().all())


async def toggle_vote(db: AsyncSession, *, user: User, data: VoteIn) -> dict:
    """Create, flip or remove the user's vote on a deal, coupon or comment.

    Same direction twice removes the vote; the other direction updates it.
    """
    column, target_id, model = _target(data)
    user_id = user.id  # rollback below expires ORM state

    res = await db.execute(select(model.id).where(model.id == target_id))
    if res.first() is None:
        raise VoteTargetNotFound(f"{model.__name__} not found.")

    existing = await _existing_vote(db, user_id, column, target_id)

    if existing is None:
        db.add(Vote(user_id=user_id, vote_type=data.vote_type, **{column: target_id}))
        try:
            await db.commit()
            action = "created"
        except IntegrityError:
            # a concurrent request inserted the same (user, target) first
            await db.rollback()
            existing = await _existing_vote(db, user_id, column, target_id)
            if existing is None:
                raise VoteError("Could not record vote.")
            existing.vote_type = data.vote_type
            await db.commit()
            action = "updated"
    elif existing.vote_type == data.vote_type:
        await db.delete(existing)
        await db.commit()
        action = "removed"
    else:
        existing.vote_type = data.vote_type
        await db.commit()
        action = "updated"

    logger.debug("Vote %s: user=%s %s=%s", action, user_id, column, target_id)
    return {"action": action, "score": await _score(db, column, target_id)}
