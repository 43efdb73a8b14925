#!/usr/bin/env python3
"""
GitHub issue source

Counts open/closed/merged/assigned issues per configured repository and turns
them into the metrics shown on the grid (two columns per repository).
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

import httpx

from metric_display import Color, ColumnRatio, Metric
from settings import RepositorySettings, Settings

GITHUB_API_URL = "https://api.github.com"
PAGE_SIZE = 100

OPEN_COLOR = Color(0, 255, 0)
CLOSED_COLOR = Color(0, 0, 255)
MERGED_COLOR = Color(191, 119, 246)
UNASSIGNED_COLOR = Color(12, 255, 12)
ASSIGNED_COLOR = Color(2, 171, 46)


class IssueSourceError(Exception):
    """GitHub could not be queried"""


@dataclass
class RepositoryCounts:
    repository: str
    open: int = 0
    closed: int = 0
    merged: int = 0
    assigned: int = 0

    @property
    def total(self) -> int:
        return self.open + self.closed

    def to_metrics(self) -> List[Metric]:
        """State split column followed by the assignment split column"""
        return [
            ColumnRatio(
                width=1,
                values=[self.open, self.closed - self.merged, self.merged],
                colors=[OPEN_COLOR, CLOSED_COLOR, MERGED_COLOR],
            ),
            ColumnRatio(
                width=1,
                values=[self.open - self.assigned, self.assigned],
                colors=[UNASSIGNED_COLOR, ASSIGNED_COLOR],
            ),
        ]

    def summary(self) -> str:
        return (
            f"Summary for {self.repository} ({self.total} issues):\n"
            f"\tOpen: {self.open}\n"
            f"\tClosed: {self.closed}\n"
            f"\tMerged: {self.merged}\n"
            f"\tAssigned: {self.assigned}"
        )


class GitHubClient:
    """Minimal read-only client for the issues endpoint"""

    def __init__(self, token: str, base_url: str = GITHUB_API_URL,
                 timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        self._client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "gh-ledgrid-viewer",
            },
            timeout=timeout,
            transport=transport,
        )

    def list_issues(self, repo: RepositorySettings, state: str,
                    since: Optional[str] = None) -> Iterator[Dict[str, Any]]:
        """Yield every issue (pull requests included) across all pages"""
        params: Optional[Dict[str, Any]] = {"state": state, "per_page": PAGE_SIZE}
        if repo.labels:
            params["labels"] = ",".join(repo.labels)
        if since:
            params["since"] = since

        url = f"/repos/{repo.user}/{repo.name}/issues"
        while url:
            try:
                resp = self._client.get(url, params=params)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise IssueSourceError(
                    f"GitHub returned {exc.response.status_code} for {repo.full_name} ({state} issues)"
                ) from exc
            except httpx.HTTPError as exc:
                raise IssueSourceError(f"Failed to list {state} issues for {repo.full_name}: {exc}") from exc

            yield from resp.json()
            # The next link already carries the query string
            url = resp.links.get("next", {}).get("url")
            params = None

    def close(self):
        self._client.close()


class IssueSource:
    """Produces the metric sequence for one display cycle"""

    def __init__(self, settings: Settings, client: Optional[GitHubClient] = None):
        self.settings = settings
        self.client = client or GitHubClient(settings.github_token)
        self.last_counts: List[RepositoryCounts] = []

    def count_repository(self, repo: RepositorySettings) -> RepositoryCounts:
        counts = RepositoryCounts(repository=repo.full_name)

        for issue in self.client.list_issues(repo, "open"):
            counts.open += 1
            if issue.get("assignee"):
                counts.assigned += 1

        since_date = repo.closed_since_date()
        since = since_date.strftime("%Y-%m-%dT%H:%M:%SZ") if since_date else None
        for issue in self.client.list_issues(repo, "closed", since=since):
            counts.closed += 1
            pull_request = issue.get("pull_request") or {}
            if pull_request.get("merged_at"):
                counts.merged += 1

        return counts

    def collect_metrics(self) -> List[Metric]:
        """Query every repository and return its columns in settings order"""
        metrics: List[Metric] = []
        self.last_counts = []
        for repo in self.settings.repositories:
            counts = self.count_repository(repo)
            print(counts.summary())
            self.last_counts.append(counts)
            metrics.extend(counts.to_metrics())
        return metrics

    def close(self):
        self.client.close()
