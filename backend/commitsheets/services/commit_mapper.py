from commitsheets.models.commit import ChangeStatus, CommitRecord, CommitRow, DiffStat, FileChange
from datetime import datetime, timezone
from typing import List, Tuple, get_args
import re

SHORT_HASH_LENGTH = 7

KNOWN_STATUSES = set(get_args(ChangeStatus))

AUTHOR_PATTERN = re.compile(r"^(.+?)\s*<(.+?)>$")


def short_hash(commit_hash: str) -> str:
    return commit_hash[:SHORT_HASH_LENGTH]


def parse_author(raw: str) -> Tuple[str, str]:
    """split 'Name <email>' into (name, email); anything else is all name"""
    match = AUTHOR_PATTERN.match(raw)
    if match:
        return match.group(1).strip(), match.group(2)
    return raw, ""


def normalize_date(value: str) -> str:
    """canonical UTC timestamp with millisecond precision, e.g. 2024-01-15T10:30:00.000Z"""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def to_file_change(stat: DiffStat) -> FileChange:
    new_path = stat.new.path if stat.new else None
    old_path = stat.old.path if stat.old else None

    path = new_path or old_path or "unknown"

    return FileChange(
        path=path,
        status=stat.status if stat.status in KNOWN_STATUSES else "modified",
        old_path=old_path if old_path and old_path != path else None,
        additions=stat.lines_added,
        deletions=stat.lines_removed,
    )


def map_commit(commit: CommitRecord, diff_stats: List[DiffStat], repository: str) -> CommitRow:
    name, email = parse_author(commit.author.raw)
    files_changed = [to_file_change(stat) for stat in diff_stats]

    links = commit.links
    summary = commit.summary.raw if commit.summary else None
    if not summary and commit.rendered and commit.rendered.message:
        summary = commit.rendered.message.raw

    return CommitRow(
        hash=commit.hash,
        short_hash=short_hash(commit.hash),
        message=commit.message.strip(),
        author=name,
        author_email=email,
        date=normalize_date(commit.date),
        parent_hashes=[short_hash(parent.hash) for parent in commit.parents],
        repository=repository,
        commit_url=links.html.href if links and links.html else None,
        diff_url=links.diff.href if links and links.diff else None,
        files_changed=files_changed,
        files_changed_count=len(files_changed),
        total_additions=sum(change.additions or 0 for change in files_changed),
        total_deletions=sum(change.deletions or 0 for change in files_changed),
        summary=summary or None,
    )
