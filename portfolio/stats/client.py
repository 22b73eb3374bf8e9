"""
GitHub and LeetCode profile stats clients
"""
import logging
from typing import Optional

import requests

from portfolio.shared import config
from portfolio.shared.errors import StatsRateLimited, StatsUnavailable, StatsUserNotFound

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
LEETCODE_API_URL = "https://leetcode-stats-api.herokuapp.com"

EVENTS_TIMEOUT = 5  # seconds; the contribution estimate is best effort
TOP_REPO_COUNT = 3


def _raise_for_status(response: requests.Response, provider: str, username: str) -> None:
    if response.status_code == 404:
        raise StatsUserNotFound(f"{provider} user '{username}' not found")
    if response.status_code in (403, 429):
        raise StatsRateLimited(f"{provider} API rate limit exceeded")
    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        raise StatsUnavailable(f"{provider} API error: {e}") from e


def _get_json(url: str, provider: str, username: str, **kwargs):
    try:
        response = requests.get(url, **kwargs)
    except requests.RequestException as e:
        logger.error(f"Failed to fetch {provider} stats for {username}: {e}")
        raise StatsUnavailable(f"{provider} API unavailable") from e
    _raise_for_status(response, provider, username)
    try:
        return response.json()
    except ValueError as e:
        raise StatsUnavailable(f"{provider} API returned invalid JSON") from e


def _top_repos(repos: list) -> list:
    own_repos = [repo for repo in repos if not repo.get("fork")]
    own_repos.sort(key=lambda repo: repo.get("stargazers_count", 0), reverse=True)
    return [
        {
            "name": repo.get("name"),
            "description": repo.get("description") or "No description available",
            "stars": repo.get("stargazers_count", 0),
            "forks": repo.get("forks_count", 0),
            "language": repo.get("language") or "Unknown",
            "url": repo.get("html_url"),
        }
        for repo in own_repos[:TOP_REPO_COUNT]
    ]


def _estimate_contributions(username: str, headers: dict) -> int:
    # The public API has no contribution count; recent public events are a rough proxy
    try:
        response = requests.get(
            f"{GITHUB_API_URL}/users/{username}/events/public",
            headers=headers,
            params={"per_page": 100},
            timeout=EVENTS_TIMEOUT,
        )
        response.raise_for_status()
        return len(response.json()) * 10
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"GitHub events fetch failed for {username}: {e}")
        return 0


def fetch_github_stats(
    username: str,
    token: Optional[str] = None,
    timeout: Optional[float] = None,
) -> dict:
    """
    Fetch profile, repository and activity stats for a GitHub user.

    Pass ``token`` (a personal access token) for higher rate limits.
    Raises StatsUnavailable (or a subclass) when the profile or repo
    listing cannot be fetched.
    """
    timeout = timeout or config.STATS_HTTP_TIMEOUT
    headers = {"Accept": "application/vnd.github.v3+json"}
    if token:
        headers["Authorization"] = f"token {token}"

    user = _get_json(
        f"{GITHUB_API_URL}/users/{username}",
        "GitHub", username, headers=headers, timeout=timeout,
    )
    repos = _get_json(
        f"{GITHUB_API_URL}/users/{username}/repos",
        "GitHub", username,
        headers=headers, params={"sort": "stars", "per_page": 100}, timeout=timeout,
    )

    return {
        "username": user.get("login", username),
        "name": user.get("name") or user.get("login", username),
        "bio": user.get("bio") or "",
        "avatarUrl": user.get("avatar_url"),
        "totalRepos": user.get("public_repos", 0),
        "totalStars": sum(repo.get("stargazers_count", 0) for repo in repos),
        "followers": user.get("followers", 0),
        "following": user.get("following", 0),
        "contributions": _estimate_contributions(username, headers),
        "topRepos": _top_repos(repos),
    }


def fetch_leetcode_stats(username: str, timeout: Optional[float] = None) -> dict:
    """
    Fetch solved-problem stats for a LeetCode user.
    """
    timeout = timeout or config.STATS_HTTP_TIMEOUT
    data = _get_json(
        f"{LEETCODE_API_URL}/{username}",
        "LeetCode", username,
        headers={"Content-Type": "application/json"}, timeout=timeout,
    )

    if data.get("status") != "success" or not data.get("message"):
        logger.error(f"LeetCode API returned error: {data.get('message') or 'Unknown error'}")
        raise StatsUserNotFound(f"LeetCode user '{username}' not found")

    return {
        "username": username,
        "totalSolved": data.get("totalSolved") or 0,
        "easySolved": data.get("easySolved") or 0,
        "mediumSolved": data.get("mediumSolved") or 0,
        "hardSolved": data.get("hardSolved") or 0,
        "totalQuestions": data.get("totalQuestions") or 0,
        "easyTotal": data.get("totalEasy") or 0,
        "mediumTotal": data.get("totalMedium") or 0,
        "hardTotal": data.get("totalHard") or 0,
        "acceptanceRate": round(data.get("acceptanceRate") or 0),
        "ranking": data.get("ranking") or 0,
        "submissionCalendar": data.get("submissionCalendar") or {},
    }


def github_fetcher(username: str) -> dict:
    return fetch_github_stats(username, token=config.GITHUB_TOKEN)


PROVIDERS = {
    "github": github_fetcher,
    "leetcode": fetch_leetcode_stats,
}
