from commitsheets.core.errors import SheetsError
from commitsheets.core.logging import get_logger
from commitsheets.models.commit import CommitRow
from commitsheets.services.sheet_layouts import SheetLayout, minimal_layout
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import Error as GoogleApiError
from httplib2 import HttpLib2Error
from typing import List, Optional
import asyncio

logger = get_logger(__name__)

HEADER_BACKGROUND = {"red": 0.2, "green": 0.4, "blue": 0.6}
HEADER_TEXT = {"red": 1, "green": 1, "blue": 1}


class SheetsService:
    """writes commit rows into one tab of a spreadsheet, replacing its contents"""

    def __init__(self, spreadsheet_id: str, client):
        self.spreadsheet_id = spreadsheet_id
        self.client = client

    async def _execute(self, step: str, request) -> dict:
        #google client calls block; keep them off the event loop
        try:
            return await asyncio.to_thread(request.execute)
        #HttpError is a GoogleApiError; httplib2 transport errors are not OSErrors
        except (GoogleApiError, HttpLib2Error, GoogleAuthError, OSError) as e:
            logger.error("sheets request failed", step=step, spreadsheet_id=self.spreadsheet_id, error=str(e))
            raise SheetsError(step, str(e)) from e

    async def write_commits(
        self,
        commits: List[CommitRow],
        sheet_name: str = "Commits",
        layout: Optional[SheetLayout] = None,
    ) -> None:
        layout = layout or minimal_layout()
        logger.info("writing commits", sheet=sheet_name, layout=layout.name, rows=len(commits))

        sheet_id = await self.ensure_sheet(sheet_name)
        await self.clear_sheet(sheet_name)

        await self._execute(
            "update values",
            self.client.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{quote_sheet(sheet_name)}!A1",
                valueInputOption=layout.value_input_option,
                body={"values": layout.to_values(commits)},
            ),
        )

        await self.format_header(sheet_id, len(layout.columns))
        logger.info("commits written", sheet=sheet_name, rows=len(commits))

    async def ensure_sheet(self, sheet_name: str) -> Optional[int]:
        """id of the named tab, creating the tab when it is missing"""
        spreadsheet = await self._execute(
            "get metadata",
            self.client.spreadsheets().get(spreadsheetId=self.spreadsheet_id),
        )
        for sheet in spreadsheet.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == sheet_name:
                return properties.get("sheetId")

        logger.info("creating sheet", sheet=sheet_name)
        response = await self._execute(
            "add sheet",
            self.client.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={"requests": [{"addSheet": {"properties": {"title": sheet_name}}}]},
            ),
        )
        replies = response.get("replies") or [{}]
        return replies[0].get("addSheet", {}).get("properties", {}).get("sheetId")

    async def clear_sheet(self, sheet_name: str) -> None:
        await self._execute(
            "clear range",
            self.client.spreadsheets().values().clear(
                spreadsheetId=self.spreadsheet_id,
                range=f"{quote_sheet(sheet_name)}!A:Z",
                body={},
            ),
        )

    async def format_header(self, sheet_id: Optional[int], column_count: int) -> None:
        if sheet_id is None:
            logger.warning("sheet id unknown, skipping header format")
            return

        await self._execute(
            "format header",
            self.client.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={
                    "requests": [
                        {
                            "repeatCell": {
                                "range": {"sheetId": sheet_id, "startRowIndex": 0, "endRowIndex": 1},
                                "cell": {
                                    "userEnteredFormat": {
                                        "backgroundColor": HEADER_BACKGROUND,
                                        "textFormat": {"bold": True, "foregroundColor": HEADER_TEXT},
                                    }
                                },
                                "fields": "userEnteredFormat(backgroundColor,textFormat)",
                            }
                        },
                        {
                            "autoResizeDimensions": {
                                "dimensions": {
                                    "sheetId": sheet_id,
                                    "dimension": "COLUMNS",
                                    "startIndex": 0,
                                    "endIndex": column_count,
                                }
                            }
                        },
                    ]
                },
            ),
        )


def quote_sheet(sheet_name: str) -> str:
    """A1 notation needs tab names quoted when they hold spaces or symbols"""
    return "'" + sheet_name.replace("'", "''") + "'"
