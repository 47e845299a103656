from fastapi import APIRouter

from .test_case_export import router as test_case_export_router
from .test_case_ingest import router as test_case_ingest_router

api_router = APIRouter()
api_router.include_router(test_case_export_router)
api_router.include_router(test_case_ingest_router)
