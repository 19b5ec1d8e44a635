class CommitSheetsError(Exception):
    """base error for a failed sync run"""


class ConfigurationError(CommitSheetsError):
    pass


class BitbucketError(CommitSheetsError):
    """a commit page could not be fetched"""


class SheetsError(CommitSheetsError):
    """a google sheets step failed; earlier steps are not rolled back"""

    def __init__(self, step: str, message: str):
        super().__init__(f"Google Sheets {step} failed: {message}")
        self.step = step
