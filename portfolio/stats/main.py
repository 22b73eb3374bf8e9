"""
Profile stats API

Serves GitHub and LeetCode stats through the TTL cache on app.state.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from portfolio.shared.errors import StatsRateLimited, StatsUnavailable
from portfolio.stats.cache import StatsCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["stats"])

STATS_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=7200"

FAILURE_MESSAGES = {
    "github": "GitHub user not found or API unavailable. This might be due to rate limits.",
    "leetcode": "LeetCode user not found or API unavailable",
}


def get_stats_cache(request: Request) -> StatsCache:
    return request.app.state.stats_cache


def _serve(provider: str, username: Optional[str], response: Response, cache: StatsCache):
    if not username or not username.strip():
        raise HTTPException(status_code=400, detail="Username is required")

    try:
        stats = cache.get_stats(provider, username.strip())
    except StatsRateLimited:
        logger.error(f"{provider} rate limit exceeded. Consider configuring an API token.")
        raise HTTPException(status_code=404, detail=FAILURE_MESSAGES[provider])
    except StatsUnavailable:
        raise HTTPException(status_code=404, detail=FAILURE_MESSAGES[provider])

    response.headers["Cache-Control"] = STATS_CACHE_CONTROL
    return stats


@router.get("/github")
def github_stats(
    response: Response,
    username: Optional[str] = None,
    cache: StatsCache = Depends(get_stats_cache),
):
    return _serve("github", username, response, cache)


@router.get("/leetcode")
def leetcode_stats(
    response: Response,
    username: Optional[str] = None,
    cache: StatsCache = Depends(get_stats_cache),
):
    return _serve("leetcode", username, response, cache)
