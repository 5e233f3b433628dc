from fastapi import APIRouter, Depends, Query
from typing import Optional, List

from sales_reports.database.connection import DatabaseManager
from sales_reports.models.reports import (
    ChannelResult,
    DashboardResult,
    FilterSet,
    KpiResult,
    RevenuePoint,
    StoreComparison,
    StoreResult,
    TopProduct,
)
from sales_reports.services.report_service import ReportService
from sales_reports.utils.logger import setup_logger

router = APIRouter()
logger = setup_logger(__name__)


def get_report_service() -> ReportService:
    """Report service bound to the configured database"""
    return ReportService(executor=DatabaseManager.execute_raw_query)


def get_filters(
    startDate: Optional[str] = Query(default=None, description="Inclusive start day, YYYY-MM-DD"),
    endDate: Optional[str] = Query(default=None, description="Inclusive end day, YYYY-MM-DD"),
    channelIds: Optional[List[str]] = Query(default=None, description="Channel ids, comma-joined or repeated"),
    storeIds: Optional[List[str]] = Query(default=None, description="Store ids, comma-joined or repeated"),
    dayOfWeek: Optional[List[str]] = Query(default=None, description="Weekdays 0-6 (0 = Sunday)"),
) -> FilterSet:
    """Parse report filters from the query string"""
    filters = FilterSet.model_validate({
        "startDate": startDate,
        "endDate": endDate,
        "channelIds": channelIds,
        "storeIds": storeIds,
        "dayOfWeek": dayOfWeek,
    })
    if filters.is_empty:
        logger.info("Report filters: none, covering all sales")
    else:
        logger.info(f"Report filters: {filters.model_dump(mode='json', by_alias=True, exclude_defaults=True)}")
    return filters


@router.get("/kpis", response_model=KpiResult)
async def get_kpis(
    filters: FilterSet = Depends(get_filters),
    service: ReportService = Depends(get_report_service),
):
    '''Headline KPIs for the filtered sales'''
    return await service.get_kpis(filters)

@router.get("/revenue-over-time", response_model=List[RevenuePoint])
async def get_revenue_over_time(
    filters: FilterSet = Depends(get_filters),
    service: ReportService = Depends(get_report_service),
):
    '''Daily completed revenue, one point per day in range'''
    return await service.get_revenue_over_time(filters)

@router.get("/top-products", response_model=List[TopProduct])
async def get_top_products(
    filters: FilterSet = Depends(get_filters),
    service: ReportService = Depends(get_report_service),
):
    '''Top products by completed revenue'''
    return await service.get_top_products(filters)

@router.get("/store-comparison", response_model=List[StoreComparison])
async def get_store_comparison(
    filters: FilterSet = Depends(get_filters),
    service: ReportService = Depends(get_report_service),
):
    '''Completed revenue per store'''
    return await service.get_store_comparison(filters)

@router.get("/dashboard", response_model=DashboardResult)
async def get_dashboard(
    filters: FilterSet = Depends(get_filters),
    service: ReportService = Depends(get_report_service),
):
    '''All four filtered reports in one response'''
    return await service.get_dashboard(filters)

@router.get("/channels", response_model=List[ChannelResult])
async def get_channels(service: ReportService = Depends(get_report_service)):
    '''Sales channels for the filter dropdown'''
    return await service.get_channels()

@router.get("/stores", response_model=List[StoreResult])
async def get_stores(service: ReportService = Depends(get_report_service)):
    '''Stores for the filter dropdown'''
    return await service.get_stores()
