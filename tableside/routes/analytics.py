from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.schemas.analytics import HourlySales, PopularItem, TodayStats
from tableside.services import analytics
from tableside.services.auth import AdminContext, require_admin

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.get("/today", response_model=TodayStats)
def today(db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    """
    Sales since local midnight (TIMEZONE): total sales, order count,
    average order value and number of distinct tables.
    """
    return analytics.today_stats(db)


@router.get("/sales-by-hour", response_model=List[HourlySales])
def sales_by_hour(db: Session = Depends(get_db), admin: AdminContext = Depends(require_admin)):
    return analytics.sales_by_hour(db)


@router.get("/popular-items", response_model=List[PopularItem])
def popular_items(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    admin: AdminContext = Depends(require_admin),
):
    return analytics.popular_items(db, limit=limit)
