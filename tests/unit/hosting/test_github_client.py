"""GitHubClient tests over httpx.MockTransport."""

import json

import httpx
import pytest

from conflictwatch.core.config import GitHubConfig
from conflictwatch.core.errors import ConfigurationError, HostingError
from conflictwatch.hosting.github import GitHubClient


def make_client(handler, **config):
    settings = {"token": "secret", "repository": "octo/repo", **config}
    return GitHubClient(
        GitHubConfig(**settings), transport=httpx.MockTransport(handler)
    )


def test_requires_token():
    with pytest.raises(ConfigurationError, match="token"):
        GitHubClient(GitHubConfig(repository="octo/repo"))


def test_requires_owner_and_name():
    with pytest.raises(ConfigurationError, match="owner/name"):
        GitHubClient(GitHubConfig(token="t", repository="octo"))


def test_headers_and_path():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["accept"] = request.headers["Accept"]
        return httpx.Response(200, json={"number": 5})

    with make_client(handler) as client:
        assert client.get_pull_request(5) == {"number": 5}

    assert seen["url"] == "https://api.github.com/repos/octo/repo/pulls/5"
    assert seen["auth"] == "Bearer secret"
    assert seen["accept"] == "application/vnd.github+json"


def test_enterprise_api_root():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json={})

    client = make_client(handler, api_url="https://ghe.example.com/api/v3")
    client.get_pull_request(1)

    assert seen["url"] == (
        "https://ghe.example.com/api/v3/repos/octo/repo/pulls/1"
    )


def test_pagination_stops_at_short_page():
    pages = []

    def handler(request):
        page = int(request.url.params["page"])
        pages.append(page)
        assert request.url.params["per_page"] == "2"
        data = {1: [{"n": 1}, {"n": 2}], 2: [{"n": 3}, {"n": 4}], 3: [{"n": 5}]}
        return httpx.Response(200, json=data.get(page, []))

    client = make_client(handler, page_size=2)
    items = client.list_changed_files(7)

    assert [item["n"] for item in items] == [1, 2, 3, 4, 5]
    assert pages == [1, 2, 3]


def test_pagination_stops_at_empty_page():
    pages = []

    def handler(request):
        page = int(request.url.params["page"])
        pages.append(page)
        return httpx.Response(200, json=[{"n": 1}, {"n": 2}] if page == 1 else [])

    client = make_client(handler, page_size=2)

    assert len(client.list_reviews(1)) == 2
    assert pages == [1, 2]


def test_open_pull_requests_filter():
    def handler(request):
        assert request.url.path == "/repos/octo/repo/pulls"
        assert request.url.params["state"] == "open"
        return httpx.Response(200, json=[])

    assert make_client(handler).list_open_pull_requests() == []


def test_requested_reviewers_logins():
    def handler(request):
        return httpx.Response(
            200,
            json={"users": [{"login": "alice"}, {"login": "carol"}], "teams": []},
        )

    assert make_client(handler).list_requested_reviewers(3) == ["alice", "carol"]


def test_request_reviewers_body():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"number": 3})

    make_client(handler).request_reviewers(3, ["alice"])

    assert seen == {
        "method": "POST",
        "path": "/repos/octo/repo/pulls/3/requested_reviewers",
        "body": {"reviewers": ["alice"]},
    }


def test_create_comment_uses_issues_endpoint():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": 1})

    make_client(handler).create_comment(9, "hello")

    assert seen["path"] == "/repos/octo/repo/issues/9/comments"
    assert seen["body"] == {"body": "hello"}


def test_http_error_raises_hosting_error():
    def handler(request):
        return httpx.Response(422, json={"message": "Reviews may only be requested from collaborators"})

    with pytest.raises(HostingError) as exc:
        make_client(handler).request_reviewers(3, ["stranger"])

    assert exc.value.status_code == 422
    assert "collaborators" in str(exc.value)


def test_transport_error_raises_hosting_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(HostingError, match="connection refused") as exc:
        make_client(handler).get_pull_request(1)

    assert exc.value.status_code is None


def test_no_content_response():
    def handler(request):
        return httpx.Response(204)

    assert make_client(handler).get_pull_request(1) is None
