from commitsheets.core.config import get_settings
from commitsheets.core.logging import get_logger
from commitsheets.schemas.report import ReportError, ReportResponse
from commitsheets.services.report_service import ReportService
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

logger = get_logger(__name__)
router = APIRouter()

def get_reportService() -> ReportService:
    return ReportService.from_settings(get_settings())

def error_response(error: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content=ReportError(error=str(error)).model_dump())

async def run_report(service: ReportService):
    try:
        result = await service.generate_report()
    except Exception as e:
        logger.error("report generation failed", error=str(e), error_type=type(e).__name__)
        return error_response(e)

    return ReportResponse(**result.model_dump())

@router.post("/generate-report", response_model=ReportResponse, responses={500: {"model": ReportError}})
async def generate_report(service: ReportService = Depends(get_reportService)):
    logger.info("report requested", method="POST")
    return await run_report(service)

@router.get("/generate-report", response_model=ReportResponse, responses={500: {"model": ReportError}})
async def generate_report_get(service: ReportService = Depends(get_reportService)):
    #same sync, triggerable from a browser
    logger.info("report requested", method="GET")
    return await run_report(service)
