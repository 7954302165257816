from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Protocol, Sequence, TypeVar


class _VoteLike(Protocol):
    user_id: str
    vote_type: str


class _Rankable(Protocol):
    score: int
    comment_count: int
    created_at: datetime


T = TypeVar("T", bound=_Rankable)


def compute_score(votes: Iterable[_VoteLike]) -> int:
    """Up-votes minus down-votes. No weighting, no decay."""
    up = 0
    down = 0
    for v in votes:
        if v.vote_type == "up":
            up += 1
        elif v.vote_type == "down":
            down += 1
    return up - down


def viewer_vote(votes: Iterable[_VoteLike], user_id: str | None) -> str | None:
    if not user_id:
        return None
    for v in votes:
        if v.user_id == user_id:
            return v.vote_type
    return None


def _ts(value: datetime | None) -> float:
    # sqlite hands back naive datetimes; treat them as UTC so mixed values compare
    if value is None:
        return float("-inf")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _expiry(item) -> float:
    expires_at = getattr(item, "expires_at", None)
    return float("inf") if expires_at is None else _ts(expires_at)


def sort_offers(items: Sequence[T], mode: str = "newest") -> list[T]:
    """Order deal/coupon view models.

    newest   -> created_at desc
    hottest  -> score desc, created_at desc
    comments -> comment_count desc, created_at desc
    expiring -> expires_at asc (undated last), created_at desc
    """
    if mode == "hottest":
        return sorted(items, key=lambda i: (i.score, _ts(i.created_at)), reverse=True)
    if mode == "comments":
        return sorted(items, key=lambda i: (i.comment_count, _ts(i.created_at)), reverse=True)
    if mode == "expiring":
        return sorted(items, key=lambda i: (_expiry(i), -_ts(i.created_at)))
    if mode == "newest":
        return sorted(items, key=lambda i: _ts(i.created_at), reverse=True)
    raise ValueError(f"Unknown sort mode: {mode}")
