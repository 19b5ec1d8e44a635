from commitsheets.core.errors import BitbucketError
from commitsheets.core.logging import get_logger
from commitsheets.models.commit import CommitPage, CommitRecord, CommitRow, DiffStat, DiffStatPage
from commitsheets.services.commit_mapper import map_commit
import asyncio
import httpx
from typing import Optional, List

logger= get_logger(__name__)

DEFAULT_API_URL = "https://api.bitbucket.org/2.0"

class BitbucketService:
    def __init__(
        self,
        workspace: str,
        repo_slug: str,
        access_token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.workspace = workspace
        self.repo_slug = repo_slug
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers={
            "Accept":"application/json",
            "Authorization":f"Bearer {access_token}",
        }
        logger.info("bitbucket service initialized", repository=self.repository)

    @property
    def repository(self) -> str:
        return f"{self.workspace}/{self.repo_slug}"

    @property
    def commits_path(self) -> str:
        return f"/repositories/{self.workspace}/{self.repo_slug}/commits"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    def relative_path(self, next_url: str) -> str:
        """strip the api root from a 'next' link so it can be reused on the client"""
        if next_url.startswith(self.base_url):
            return next_url[len(self.base_url):] or "/"
        return next_url

    async def fetch_all_commits(self, max_pages: int = 50, enrich: bool = True) -> List[CommitRow]:
        #walk every commit page; any page failure aborts the run
        logger.info("starting commit fetch", repository=self.repository, max_pages=max_pages, enrich=enrich)

        commits: List[CommitRow] = []
        url: Optional[str] = self.commits_path
        page = 0

        async with self._client() as client:
            while url and page < max_pages:
                logger.debug("fetching commit page", page=page + 1, current_count=len(commits))
                commit_page = await self._get_page(client, url, page + 1)

                if enrich:
                    #one diffstat call per commit, gathered in page order
                    rows = await asyncio.gather(
                        *(self._get_commitDetails(client, commit) for commit in commit_page.values)
                    )
                else:
                    rows = [map_commit(commit, [], self.repository) for commit in commit_page.values]
                commits.extend(rows)

                url = self.relative_path(commit_page.next) if commit_page.next else None
                page += 1

                if page % 10 == 0:
                    logger.info("fetch progress", pages=page, total_commits=len(commits))

        if url:
            logger.warning("page limit reached before end of history", max_pages=max_pages)

        logger.info("commit fetch completed", repository=self.repository, pages=page, total_commits=len(commits))
        return commits

    async def _get_page(self, client: httpx.AsyncClient, url: str, page: int) -> CommitPage:
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error("failed to fetch commit page", page=page, error=str(e))
            raise BitbucketError(f"Bitbucket request failed on page {page}: {e}") from e

        if response.status_code != 200:
            logger.error("failed to fetch commit page", page=page, status_code=response.status_code)
            raise BitbucketError(f"Bitbucket API error on page {page}: {response.status_code}")

        try:
            return CommitPage.model_validate(response.json())
        except ValueError as e:
            logger.error("malformed commit page", page=page, error=str(e))
            raise BitbucketError(f"Malformed Bitbucket response on page {page}") from e

    async def _get_commitDetails(self, client: httpx.AsyncClient, commit: CommitRecord) -> CommitRow:
        diff_stats = await self.get_diffStats(client, commit.hash)
        return map_commit(commit, diff_stats, self.repository)

    async def get_diffStats(self, client: httpx.AsyncClient, commit_hash: str) -> List[DiffStat]:
        """per-file change stats for one commit; empty on any failure"""
        try:
            response = await client.get(
                f"/repositories/{self.workspace}/{self.repo_slug}/diffstat/{commit_hash}"
            )
            if response.status_code != 200:
                logger.warning("failed to fetch diff stats", hash=commit_hash[:8], status_code=response.status_code)
                return []

            return DiffStatPage.model_validate(response.json()).values
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("failed to fetch diff stats", hash=commit_hash[:8], error=str(e))
            return []
