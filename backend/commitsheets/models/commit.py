from pydantic import BaseModel, Field
from typing import Optional, List, Literal

ChangeStatus = Literal["added", "removed", "modified", "renamed"]

#bitbucket payload shapes, only the fields the sync reads
class Href(BaseModel):
    href: str

class CommitLinks(BaseModel):
    html: Optional[Href] = None
    diff: Optional[Href] = None

class Author(BaseModel):
    raw: str = ""

class Parent(BaseModel):
    hash: str

class RawText(BaseModel):
    raw: Optional[str] = None

class RenderedCommit(BaseModel):
    message: Optional[RawText] = None

class CommitRecord(BaseModel):
    hash: str = Field(..., min_length=7)
    message: str = ""
    author: Author = Field(default_factory=Author)
    date: str
    parents: List[Parent] = []
    links: Optional[CommitLinks] = None
    summary: Optional[RawText] = None
    rendered: Optional[RenderedCommit] = None

class CommitPage(BaseModel):
    values: List[CommitRecord] = []
    next: Optional[str] = None

class DiffPath(BaseModel):
    path: str

class DiffStat(BaseModel):
    #bitbucket also reports "merge conflict", "local deleted", "remote deleted"
    status: str
    old: Optional[DiffPath] = None
    new: Optional[DiffPath] = None
    lines_added: Optional[int] = None
    lines_removed: Optional[int] = None

class DiffStatPage(BaseModel):
    values: List[DiffStat] = []


#normalized rows handed to the sheet writer
class FileChange(BaseModel):
    path: str
    status: ChangeStatus
    old_path: Optional[str] = None
    additions: Optional[int] = None
    deletions: Optional[int] = None

class CommitRow(BaseModel):
    hash: str
    short_hash: str
    message: str
    author: str
    author_email: str
    date: str
    parent_hashes: List[str] = []
    repository: str

    commit_url: Optional[str] = None
    diff_url: Optional[str] = None
    files_changed: List[FileChange] = []
    files_changed_count: int = 0
    total_additions: int = 0
    total_deletions: int = 0
    summary: Optional[str] = None
