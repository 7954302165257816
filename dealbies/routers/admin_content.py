from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from dealbies.core.db import get_db
from dealbies.core.deps import require_admin
from dealbies.schemas.coupons import CouponOut, CouponUpdate
from dealbies.schemas.deals import DealOut, DealUpdate
from dealbies.services.coupons import CouponError, CouponNotFound, delete_coupon, update_coupon
from dealbies.services.deals import DealError, DealNotFound, delete_deal, update_deal

router = APIRouter(prefix="/api/admin", tags=["Admin Content"])


@router.patch("/deals/{deal_id}", response_model=DealOut)
async def admin_update_deal(
    deal_id: str,
    data: DealUpdate,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_admin),
):
    try:
        return await update_deal(db, deal_id, data)
    except DealNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DealError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/deals/{deal_id}")
async def admin_delete_deal(
    deal_id: str,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_admin),
):
    try:
        await delete_deal(db, deal_id)
    except DealNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"detail": "Deleted"}


@router.patch("/coupons/{coupon_id}", response_model=CouponOut)
async def admin_update_coupon(
    coupon_id: str,
    data: CouponUpdate,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_admin),
):
    try:
        return await update_coupon(db, coupon_id, data)
    except CouponNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CouponError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/coupons/{coupon_id}")
async def admin_delete_coupon(
    coupon_id: str,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_admin),
):
    try:
        await delete_coupon(db, coupon_id)
    except CouponNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"detail": "Deleted"}
