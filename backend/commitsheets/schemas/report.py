from pydantic import BaseModel

class ReportResult(BaseModel):
    commits_count: int
    repository: str
    spreadsheet_id: str

class ReportResponse(ReportResult):
    success: bool = True
    message: str = "Report generated successfully"

class ReportError(BaseModel):
    success: bool = False
    error: str

class HealthResponse(BaseModel):
    status: str = "ok"
    message: str
