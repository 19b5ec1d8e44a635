from commitsheets.core.config import Settings
from commitsheets.core.google import build_sheets_client
from commitsheets.core.logging import get_logger
from commitsheets.schemas.report import ReportResult
from commitsheets.services.bitbucket_service import BitbucketService
from commitsheets.services.sheets_service import SheetsService
from commitsheets.services.sheet_layouts import SheetLayout, get_layout

logger = get_logger(__name__)

class ReportService():
    """one full sync: fetch every commit, then overwrite the target tab"""

    def __init__(
        self,
        bitbucket: BitbucketService,
        sheets: SheetsService,
        layout: SheetLayout,
        sheet_name: str = "Commits",
        max_pages: int = 50,
        enrich: bool = True,
    ):
        self.bitbucket = bitbucket
        self.sheets = sheets
        self.layout = layout
        self.sheet_name = sheet_name
        self.max_pages = max_pages
        self.enrich = enrich

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReportService":
        bitbucket = BitbucketService(
            settings.BITBUCKET_WORKSPACE,
            settings.BITBUCKET_REPO_SLUG,
            settings.BITBUCKET_ACCESS_TOKEN,
            base_url=settings.BITBUCKET_API_URL,
            timeout=settings.HTTP_TIMEOUT,
        )
        sheets = SheetsService(
            settings.GOOGLE_SPREADSHEET_ID,
            build_sheets_client(settings.GOOGLE_CREDENTIALS_PATH),
        )
        return cls(
            bitbucket,
            sheets,
            layout=get_layout(settings.SHEET_LAYOUT, settings.TICKET_BASE_URL),
            sheet_name=settings.SHEET_NAME,
            max_pages=settings.MAX_PAGES,
            enrich=settings.ENRICH_DIFFSTATS,
        )

    async def generate_report(self) -> ReportResult:
        logger.info("starting sync", repository=self.bitbucket.repository, sheet=self.sheet_name)

        commits = await self.bitbucket.fetch_all_commits(max_pages=self.max_pages, enrich=self.enrich)
        await self.sheets.write_commits(commits, sheet_name=self.sheet_name, layout=self.layout)

        logger.info("sync completed", repository=self.bitbucket.repository, commits=len(commits))
        return ReportResult(
            commits_count=len(commits),
            repository=self.bitbucket.repository,
            spreadsheet_id=self.sheets.spreadsheet_id,
        )
