from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from commitsheets import __version__
from commitsheets.core.config import APP_NAME, get_settings
from commitsheets.core.errors import CommitSheetsError
from commitsheets.core.logging import setup_logging, get_logger, LoggingMiddleware
from commitsheets.routers import reports
from commitsheets.routers.reports import error_response
from commitsheets.schemas.report import HealthResponse
from contextlib import asynccontextmanager
import uvicorn

setup_logging()
logger=get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    #missing configuration stops the server before it accepts requests
    settings = get_settings()
    setup_logging(settings.DEBUG)
    logger.info("server starting", repository=settings.repository, spreadsheet_id=settings.GOOGLE_SPREADSHEET_ID)
    yield
    logger.info("server stopped")


app=FastAPI(
    title=APP_NAME,
    version=__version__,
    lifespan=lifespan
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

app.include_router(
    reports.router,
    prefix="/api",
    tags=["reports"]
)

@app.exception_handler(CommitSheetsError)
async def commitsheets_error_handler(request: Request, exc: CommitSheetsError):
    #raised while building the report service, before the route runs
    logger.error("request failed", path=request.url.path, error=str(exc))
    return error_response(exc)

@app.get("/")
async def root():
    return {"message":APP_NAME, "version":__version__, "status":"running"}

@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(message=f"{APP_NAME} is running")


def run_server(host: str = None, port: int = None):
    settings = get_settings()
    uvicorn.run(
        app,
        host=host or settings.HOST,
        port=port or settings.PORT,
        log_config=None,
    )

if __name__ =="__main__":
    run_server()
