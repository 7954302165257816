from __future__ import annotations

from urllib.parse import urljoin

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.logger import get_logger
from dealbies.services.redirector import FALLBACK_PATH, ClientMeta, resolve_visit

logger = get_logger("routers.visit")

router = APIRouter(tags=["Redirector"])


def client_meta(request: Request) -> ClientMeta:
    headers = request.headers

    ip = None
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip() or None
    if not ip:
        ip = headers.get("x-real-ip")
    if not ip and request.client:
        ip = request.client.host

    return ClientMeta(
        user_agent=headers.get("user-agent") or None,
        ip_address=(ip or "unknown")[:255],
        referer=headers.get("referer") or None,
    )


@router.get("/visit/{slug}", response_class=RedirectResponse)
async def visit(
    slug: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """
    Outbound merchant link: attach affiliate params, log the click, redirect.
    Never errors; failures land on the home page.
    """
    try:
        target = await resolve_visit(db, slug, client_meta(request))
    except Exception:
        logger.exception("Error in redirector for slug %r", slug)
        target = FALLBACK_PATH

    if target.startswith("/"):
        # site paths: /, /not-found, /deal/{slug}, /coupon/{slug}
        target = urljoin(str(request.base_url), target)
    return RedirectResponse(url=target, status_code=302)
