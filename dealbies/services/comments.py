from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealbies.models.comment import Comment
from dealbies.models.coupon import Coupon
from dealbies.models.deal import Deal
from dealbies.models.user import User
from dealbies.schemas.comments import CommentCreate, CommentOut
from dealbies.services.deals import posted_by
from dealbies.services.scoring import compute_score, viewer_vote


class CommentError(Exception):
    pass


class CommentTargetNotFound(CommentError):
    pass


def comment_view(comment: Comment, viewer_id: str | None, *, with_replies: bool = True) -> CommentOut:
    replies = []
    if with_replies:
        replies = [comment_view(r, viewer_id, with_replies=False) for r in comment.replies]

    return CommentOut(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        posted_by=posted_by(comment.user),
        score=compute_score(comment.votes),
        user_vote=viewer_vote(comment.votes, viewer_id),
        replies=replies,
    )


async def list_comments(
    db: AsyncSession,
    *,
    deal_id: str | None = None,
    coupon_id: str | None = None,
    viewer_id: str | None = None,
) -> list[CommentOut]:
    """Top-level comments newest first, replies oldest first."""
    stmt = (
        select(Comment)
        .where(Comment.parent_id.is_(None))
        .options(
            selectinload(Comment.votes),
            selectinload(Comment.replies).selectinload(Comment.votes),
        )
        .order_by(Comment.created_at.desc())
    )
    if deal_id is not None:
        stmt = stmt.where(Comment.deal_id == deal_id)
    else:
        stmt = stmt.where(Comment.coupon_id == coupon_id)

    res = await db.execute(stmt)
    return [comment_view(c, viewer_id) for c in res.scalars().all()]


async def _target_exists(db: AsyncSession, data: CommentCreate) -> bool:
    if data.deal_id:
        res = await db.execute(select(Deal.id).where(Deal.id == data.deal_id))
    else:
        res = await db.execute(select(Coupon.id).where(Coupon.id == data.coupon_id))
    return res.first() is not None


async def create_comment(db: AsyncSession, *, user: User, data: CommentCreate) -> CommentOut:
    if not await _target_exists(db, data):
        raise CommentTargetNotFound("Deal or coupon not found.")

    if data.parent_id:
        res = await db.execute(select(Comment).where(Comment.id == data.parent_id))
        parent = res.scalar_one_or_none()
        if parent is None:
            raise CommentTargetNotFound("Parent comment not found.")
        if parent.deal_id != data.deal_id or parent.coupon_id != data.coupon_id:
            raise CommentError("Parent comment belongs to a different offer.")
        if parent.parent_id is not None:
            raise CommentError("Replies cannot be nested.")

    comment = Comment(
        content=data.content,
        user_id=user.id,
        deal_id=data.deal_id,
        coupon_id=data.coupon_id,
        parent_id=data.parent_id,
    )
    db.add(comment)
    await db.commit()

    return CommentOut(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        posted_by=posted_by(user),
        score=0,
        user_vote=None,
        replies=[],
    )
