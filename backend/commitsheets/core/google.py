from google.oauth2 import service_account
from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from commitsheets.core.errors import ConfigurationError
from commitsheets.core.logging import get_logger

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def build_sheets_client(credentials_path: str):
    """authorized sheets v4 resource from a service-account key file"""
    try:
        credentials = service_account.Credentials.from_service_account_file(
            credentials_path, scopes=SCOPES
        )
    except (OSError, ValueError, GoogleAuthError) as e:
        logger.error("failed to load google credentials", path=credentials_path, error=str(e))
        raise ConfigurationError(
            f"Cannot load Google credentials from {credentials_path}: {e}"
        ) from e

    logger.info("google sheets client initialized", service_account=credentials.service_account_email)
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)
