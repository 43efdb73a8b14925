"""GitHub issue source tests against a mocked HTTP transport."""

import unittest

import httpx

from issue_source import (
    ASSIGNED_COLOR, CLOSED_COLOR, MERGED_COLOR, OPEN_COLOR, UNASSIGNED_COLOR,
    GitHubClient, IssueSource, IssueSourceError, RepositoryCounts,
)
from metric_display import ColumnRatio
from settings import RepositorySettings, Settings


def _issue(number, assignee=None, merged_at=None, pull=False):
    issue = {"number": number, "assignee": assignee}
    if pull or merged_at:
        issue["pull_request"] = {"merged_at": merged_at}
    return issue


class _FakeGitHub:
    """Serves canned issue pages and records the requests it saw"""

    def __init__(self, open_pages, closed_pages, status_code=200):
        self.pages = {"open": open_pages, "closed": closed_pages}
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "nope"})
        state = request.url.params["state"]
        page = int(request.url.params.get("page", "1"))
        pages = self.pages[state]
        headers = {}
        if page < len(pages):
            next_url = request.url.copy_merge_params({"page": str(page + 1)})
            headers["Link"] = f'<{next_url}>; rel="next"'
        return httpx.Response(200, json=pages[page - 1], headers=headers)


def _source(fake, repositories=None):
    settings = Settings(
        github_token="t0ken",
        repositories=repositories or [RepositorySettings(user="octo", name="grid")],
    )
    client = GitHubClient("t0ken", transport=httpx.MockTransport(fake))
    return IssueSource(settings, client=client)


class RepositoryCountsTests(unittest.TestCase):
    def test_metrics_layout(self):
        counts = RepositoryCounts("octo/grid", open=5, closed=7, merged=3, assigned=2)
        state, assignment = counts.to_metrics()
        self.assertEqual(state, ColumnRatio(1, [5, 4, 3], [OPEN_COLOR, CLOSED_COLOR, MERGED_COLOR]))
        self.assertEqual(assignment, ColumnRatio(1, [3, 2], [UNASSIGNED_COLOR, ASSIGNED_COLOR]))
        self.assertEqual(counts.total, 12)
        self.assertIn("Merged: 3", counts.summary())


class IssueSourceTests(unittest.TestCase):
    def test_counts_across_pages(self):
        fake = _FakeGitHub(
            open_pages=[
                [_issue(1, assignee={"login": "a"}), _issue(2)],
                [_issue(3, pull=True)],
            ],
            closed_pages=[
                [_issue(4, merged_at="2024-01-02T00:00:00Z"), _issue(5, pull=True), _issue(6)],
            ],
        )
        source = _source(fake)
        counts = source.count_repository(source.settings.repositories[0])
        self.assertEqual((counts.open, counts.closed, counts.merged, counts.assigned), (3, 3, 1, 1))
        self.assertEqual(len(fake.requests), 3)
        self.assertEqual(fake.requests[0].headers["Authorization"], "Bearer t0ken")
        self.assertEqual(fake.requests[0].url.path, "/repos/octo/grid/issues")

    def test_labels_and_since_are_sent(self):
        fake = _FakeGitHub(open_pages=[[]], closed_pages=[[]])
        repo = RepositorySettings(user="octo", name="grid", labels=["bug", "ui"], since="2024-03-01")
        source = _source(fake, [repo])
        source.count_repository(repo)
        open_req, closed_req = fake.requests
        self.assertEqual(open_req.url.params["labels"], "bug,ui")
        self.assertNotIn("since", open_req.url.params)
        self.assertEqual(closed_req.url.params["since"], "2024-03-01T00:00:00Z")
        self.assertEqual(closed_req.url.params["per_page"], "100")

    def test_collect_metrics_two_columns_per_repository(self):
        fake = _FakeGitHub(open_pages=[[_issue(1)]], closed_pages=[[]])
        repos = [RepositorySettings("octo", "a"), RepositorySettings("octo", "b")]
        source = _source(fake, repos)
        metrics = source.collect_metrics()
        self.assertEqual(len(metrics), 4)
        self.assertEqual([c.repository for c in source.last_counts], ["octo/a", "octo/b"])
        self.assertEqual(metrics[0].values, (1, 0, 0))

    def test_http_error_raises_issue_source_error(self):
        source = _source(_FakeGitHub([[]], [[]], status_code=502))
        with self.assertRaises(IssueSourceError):
            source.collect_metrics()


if __name__ == "__main__":
    unittest.main()
