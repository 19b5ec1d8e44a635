import pytest
from click.testing import CliRunner

from commitsheets import cli as cli_module
from commitsheets.cli import cli
from commitsheets.core.config import get_settings
from commitsheets.core.errors import BitbucketError, ConfigurationError
from commitsheets.schemas.report import ReportResult
from commitsheets.services.sheet_layouts import get_layout


@pytest.fixture(autouse=True)
def quiet_cli_logging(monkeypatch):
    # the runner swaps stdout; keep handlers bound to pytest's streams
    monkeypatch.setattr(cli_module, "setup_logging", lambda debug=False: None)


@pytest.fixture
def empty_env(monkeypatch, tmp_path, required_env):
    for key in required_env:
        monkeypatch.delenv(key, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


def test_settings_defaults(required_env):
    settings = get_settings()

    assert settings.repository == "acme/widgets"
    assert settings.GOOGLE_CREDENTIALS_PATH == "./credentials.json"
    assert settings.MAX_PAGES == 50
    assert settings.SHEET_NAME == "Commits"
    assert settings.SHEET_LAYOUT == "minimal"
    assert settings.ENRICH_DIFFSTATS is True


def test_missing_required_settings(empty_env, monkeypatch):
    monkeypatch.setenv("BITBUCKET_WORKSPACE", "acme")

    with pytest.raises(ConfigurationError) as excinfo:
        get_settings()

    message = str(excinfo.value)
    assert "BITBUCKET_REPO_SLUG" in message
    assert "GOOGLE_SPREADSHEET_ID" in message
    assert "BITBUCKET_WORKSPACE" not in message


class FakeReportService:
    def __init__(self, error=None):
        self.error = error
        self.max_pages = 50
        self.sheet_name = "Commits"
        self.layout = get_layout("minimal")
        self.enrich = True

    async def generate_report(self):
        if self.error:
            raise self.error
        return ReportResult(commits_count=3, repository="acme/widgets", spreadsheet_id="sheet-123")


def patch_service(monkeypatch, service):
    monkeypatch.setattr(cli_module.ReportService, "from_settings", classmethod(lambda cls, settings: service))
    return service


def test_run_missing_config_exits_nonzero(empty_env, monkeypatch):
    def unreachable(cls, settings):
        raise AssertionError("no service should be built without configuration")

    monkeypatch.setattr(cli_module.ReportService, "from_settings", classmethod(unreachable))

    result = CliRunner().invoke(cli, ["run"])

    assert result.exit_code == 1
    assert "Missing or invalid configuration" in result.output


def test_run_success_applies_options(required_env, monkeypatch):
    service = patch_service(monkeypatch, FakeReportService())

    result = CliRunner().invoke(
        cli, ["run", "--max-pages", "2", "--sheet-name", "Log", "--layout", "enriched", "--no-diffstat"]
    )

    assert result.exit_code == 0, result.output
    assert "Wrote 3 commits to spreadsheet sheet-123" in result.output
    assert service.max_pages == 2
    assert service.sheet_name == "Log"
    assert service.layout.name == "enriched"
    assert service.enrich is False


def test_run_failure_exits_nonzero(required_env, monkeypatch):
    patch_service(monkeypatch, FakeReportService(error=BitbucketError("Bitbucket API error on page 1: 401")))

    result = CliRunner().invoke(cli, ["run"])

    assert result.exit_code == 1
    assert "Bitbucket API error on page 1: 401" in result.output


def test_run_unexpected_failure_exits_with_error_line(required_env, monkeypatch):
    patch_service(monkeypatch, FakeReportService(error=RuntimeError("sheets transport went away")))

    result = CliRunner().invoke(cli, ["run"])

    assert result.exit_code == 1
    assert "Error: RuntimeError: sheets transport went away" in result.output
    assert isinstance(result.exception, SystemExit)
