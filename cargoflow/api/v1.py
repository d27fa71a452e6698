"""v1 API router: process workflow, dashboard stats, reports and PDF history."""

from fastapi import APIRouter

from cargoflow.modules.process.router import router as process_router
from cargoflow.modules.process.router import stats_router
from cargoflow.modules.report.router import pdf_router
from cargoflow.modules.report.router import router as report_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(process_router)
v1_router.include_router(report_router)
v1_router.include_router(stats_router)
v1_router.include_router(pdf_router)
