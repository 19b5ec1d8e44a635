from commitsheets.models.commit import CommitRow, FileChange
from typing import Callable, Dict, List, NamedTuple, Optional
import re

TICKET_PATTERN = re.compile(r"^([A-Z]+-\d+)\b")

DEFAULT_TICKET_BASE_URL = "https://example.atlassian.net/browse/"


class Column(NamedTuple):
    header: str
    cell: Callable[[CommitRow], str]


class SheetLayout(NamedTuple):
    name: str
    value_input_option: str
    columns: List[Column]

    @property
    def headers(self) -> List[str]:
        return [column.header for column in self.columns]

    def to_values(self, rows: List[CommitRow]) -> List[List[str]]:
        """header row followed by one row per commit"""
        return [self.headers] + [[column.cell(row) for column in self.columns] for row in rows]


def link_ticket(message: str, base_url: str) -> str:
    """turn a leading ticket key (ABC-123) into a tracker URL, leaving the rest alone"""
    return TICKET_PATTERN.sub(lambda match: f"{base_url}{match.group(1)}", message, count=1)


def as_text(value: str) -> str:
    """force a USER_ENTERED cell to stay literal text (no numbers, no formulas)"""
    return f"'{value}" if value else ""


def hyperlink(url: Optional[str], label: str) -> str:
    if not url:
        return ""
    escaped = url.replace('"', '""')
    return f'=HYPERLINK("{escaped}","{label}")'


def describe_file(change: FileChange) -> str:
    if change.old_path:
        text = f"{change.status}: {change.old_path} -> {change.path}"
    else:
        text = f"{change.status}: {change.path}"
    return f"{text} (+{change.additions or 0}/-{change.deletions or 0})"


def minimal_layout() -> SheetLayout:
    return SheetLayout(
        name="minimal",
        value_input_option="RAW",
        columns=[
            Column("Hash", lambda row: row.hash),
            Column("Short Hash", lambda row: row.short_hash),
            Column("Message", lambda row: row.message),
            Column("Author", lambda row: row.author),
            Column("Email", lambda row: row.author_email),
            Column("Date", lambda row: row.date),
            Column("Parents", lambda row: ", ".join(row.parent_hashes)),
            Column("Repository", lambda row: row.repository),
        ],
    )


def enriched_layout(ticket_base_url: str = DEFAULT_TICKET_BASE_URL) -> SheetLayout:
    #USER_ENTERED so HYPERLINK formulas are interpreted; every other cell is quoted text
    return SheetLayout(
        name="enriched",
        value_input_option="USER_ENTERED",
        columns=[
            Column("Hash", lambda row: as_text(row.hash)),
            Column("Short Hash", lambda row: as_text(row.short_hash)),
            Column("Message", lambda row: as_text(link_ticket(row.message, ticket_base_url))),
            Column("Date", lambda row: as_text(row.date)),
            Column("Commit", lambda row: hyperlink(row.commit_url, "View Commit")),
            Column("Diff", lambda row: hyperlink(row.diff_url, "View Diff")),
            Column("Summary", lambda row: as_text(row.summary or "")),
            Column("Files", lambda row: as_text("\n".join(describe_file(change) for change in row.files_changed))),
        ],
    )


LAYOUTS: Dict[str, Callable[..., SheetLayout]] = {
    "minimal": lambda **_: minimal_layout(),
    "enriched": enriched_layout,
}


def get_layout(name: str, ticket_base_url: str = DEFAULT_TICKET_BASE_URL) -> SheetLayout:
    try:
        factory = LAYOUTS[name]
    except KeyError:
        raise ValueError(f"unknown sheet layout: {name}") from None
    return factory(ticket_base_url=ticket_base_url)
