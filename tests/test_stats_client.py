"""
Tests for the GitHub and LeetCode clients (network calls replaced)
"""
import pytest
import requests

from portfolio.shared.errors import StatsRateLimited, StatsUnavailable, StatsUserNotFound
from portfolio.stats import client


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON object could be decoded")
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


GITHUB_USER = {
    "login": "octocat",
    "name": "The Octocat",
    "bio": None,
    "avatar_url": "https://avatars.example/octocat",
    "public_repos": 3,
    "followers": 10,
    "following": 2,
}

GITHUB_REPOS = [
    {"name": "small", "stargazers_count": 1, "forks_count": 0, "fork": False,
     "description": None, "language": None, "html_url": "https://github.com/octocat/small"},
    {"name": "big", "stargazers_count": 50, "forks_count": 4, "fork": False,
     "description": "Popular", "language": "Python", "html_url": "https://github.com/octocat/big"},
    {"name": "forked", "stargazers_count": 500, "forks_count": 0, "fork": True,
     "description": "Not mine", "language": "C", "html_url": "https://github.com/octocat/forked"},
    {"name": "mid", "stargazers_count": 7, "forks_count": 1, "fork": False,
     "description": "Tooling", "language": "Go", "html_url": "https://github.com/octocat/mid"},
    {"name": "tiny", "stargazers_count": 0, "forks_count": 0, "fork": False,
     "description": "", "language": "Rust", "html_url": "https://github.com/octocat/tiny"},
]


def route_github(monkeypatch, user=None, repos=None, events=None, status_code=200):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        if url.endswith("/events/public"):
            if isinstance(events, Exception):
                raise events
            return FakeResponse(events if events is not None else [{}] * 4)
        if url.endswith("/repos"):
            return FakeResponse(repos if repos is not None else GITHUB_REPOS)
        return FakeResponse(user or GITHUB_USER, status_code=status_code)

    monkeypatch.setattr(client.requests, "get", fake_get)
    return calls


def test_github_stats(monkeypatch):
    calls = route_github(monkeypatch)

    stats = client.fetch_github_stats("octocat", token="ghp_test", timeout=3)

    assert stats["username"] == "octocat"
    assert stats["name"] == "The Octocat"
    assert stats["bio"] == ""
    assert stats["totalStars"] == 558
    assert stats["contributions"] == 40
    assert [repo["name"] for repo in stats["topRepos"]] == ["big", "mid", "small"]
    assert stats["topRepos"][2]["description"] == "No description available"
    assert stats["topRepos"][2]["language"] == "Unknown"

    profile_url, profile_kwargs = calls[0]
    assert profile_url == "https://api.github.com/users/octocat"
    assert profile_kwargs["headers"]["Authorization"] == "token ghp_test"
    assert profile_kwargs["timeout"] == 3


def test_github_contributions_fall_back_to_zero(monkeypatch):
    route_github(monkeypatch, events=requests.Timeout("slow"))

    stats = client.fetch_github_stats("octocat")

    assert stats["contributions"] == 0
    assert stats["totalRepos"] == 3


def test_github_unknown_user(monkeypatch):
    route_github(monkeypatch, status_code=404)

    with pytest.raises(StatsUserNotFound):
        client.fetch_github_stats("ghost")


@pytest.mark.parametrize("status_code", [403, 429])
def test_github_rate_limited(monkeypatch, status_code):
    route_github(monkeypatch, status_code=status_code)

    with pytest.raises(StatsRateLimited):
        client.fetch_github_stats("octocat")


def test_github_server_error(monkeypatch):
    route_github(monkeypatch, status_code=502)

    with pytest.raises(StatsUnavailable):
        client.fetch_github_stats("octocat")


def test_network_failure(monkeypatch):
    def fake_get(url, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client.requests, "get", fake_get)

    with pytest.raises(StatsUnavailable):
        client.fetch_leetcode_stats("alice")


def test_leetcode_stats(monkeypatch):
    payload = {
        "status": "success",
        "message": "retrieved",
        "totalSolved": 120,
        "easySolved": 60,
        "mediumSolved": 50,
        "hardSolved": 10,
        "totalQuestions": 3000,
        "totalEasy": 800,
        "totalMedium": 1600,
        "totalHard": 600,
        "acceptanceRate": 61.7,
        "ranking": 123456,
        "submissionCalendar": {"1700000000": 3},
    }
    monkeypatch.setattr(client.requests, "get", lambda url, **kwargs: FakeResponse(payload))

    stats = client.fetch_leetcode_stats("alice")

    assert stats["username"] == "alice"
    assert stats["totalSolved"] == 120
    assert stats["hardTotal"] == 600
    assert stats["acceptanceRate"] == 62
    assert stats["submissionCalendar"] == {"1700000000": 3}


def test_leetcode_error_status(monkeypatch):
    payload = {"status": "error", "message": "user does not exist"}
    monkeypatch.setattr(client.requests, "get", lambda url, **kwargs: FakeResponse(payload))

    with pytest.raises(StatsUserNotFound):
        client.fetch_leetcode_stats("nobody")


def test_leetcode_invalid_json(monkeypatch):
    monkeypatch.setattr(client.requests, "get", lambda url, **kwargs: FakeResponse(None))

    with pytest.raises(StatsUnavailable):
        client.fetch_leetcode_stats("alice")
