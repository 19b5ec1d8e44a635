from pydantic import ValidationError
from pydantic_settings import BaseSettings
from typing import Literal
from functools import lru_cache
from commitsheets.core.errors import ConfigurationError

APP_NAME = "Bitbucket to Sheets API"

class Settings(BaseSettings):
    #app settings
    DEBUG: bool = False

    #server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    #bitbucket
    BITBUCKET_WORKSPACE: str
    BITBUCKET_REPO_SLUG: str
    BITBUCKET_ACCESS_TOKEN: str
    BITBUCKET_API_URL: str = "https://api.bitbucket.org/2.0"
    MAX_PAGES: int = 50
    ENRICH_DIFFSTATS: bool = True
    HTTP_TIMEOUT: float = 30.0

    #google sheets
    GOOGLE_SPREADSHEET_ID: str
    GOOGLE_CREDENTIALS_PATH: str = "./credentials.json"
    SHEET_NAME: str = "Commits"
    SHEET_LAYOUT: Literal["minimal", "enriched"] = "minimal"
    TICKET_BASE_URL: str = "https://example.atlassian.net/browse/"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def repository(self) -> str:
        return f"{self.BITBUCKET_WORKSPACE}/{self.BITBUCKET_REPO_SLUG}"


@lru_cache()
def get_settings() -> Settings:
    """load settings once, failing fast when required values are missing"""
    try:
        return Settings()
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Missing or invalid configuration: {', '.join(fields)}"
        ) from e
