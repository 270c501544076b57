"""MyAnimeList configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy, ShouldCacheHook

JIKAN_BASE_URL = "https://api.jikan.moe/v4"
MYANIMELIST_API_BASE_URL = "https://api.myanimelist.net/v2"
MYANIMELIST_TIMEOUT_SECONDS = 15.0
MYANIMELIST_CLIENT_ID_HEADER = "X-MAL-CLIENT-ID"
# Jikan itself refreshes upstream data once a day.
JIKAN_CACHE_TTL_SECONDS = 24 * 60 * 60.0
# Hard upper bound accepted by the v2 list endpoints.
MYANIMELIST_MAX_LIST_PAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class MyAnimeListConfig:
    """Holds MyAnimeList/Jikan API configuration values."""

    client_id: str
    jikan: ResilienceConfig
    api: ResilienceConfig
    list_page_size: int = MYANIMELIST_MAX_LIST_PAGE_SIZE

    def __post_init__(self) -> None:
        if not 1 <= self.list_page_size <= MYANIMELIST_MAX_LIST_PAGE_SIZE:
            raise ValueError(
                f"list_page_size must be between 1 and {MYANIMELIST_MAX_LIST_PAGE_SIZE}"
            )


def default_jikan_resilience(*, cache_predicate: ShouldCacheHook | None = None) -> ResilienceConfig:
    # Jikan allows 3 requests per second per client.
    return ResilienceConfig(
        name="jikan",
        base_url=JIKAN_BASE_URL,
        timeout_seconds=MYANIMELIST_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=3, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        cache=CacheConfig(ttl_seconds=JIKAN_CACHE_TTL_SECONDS, should_cache=cache_predicate),
    )


def default_api_resilience(client_id: str) -> ResilienceConfig:
    return ResilienceConfig(
        name="myanimelist",
        base_url=MYANIMELIST_API_BASE_URL,
        timeout_seconds=MYANIMELIST_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        cache=None,
        default_headers={MYANIMELIST_CLIENT_ID_HEADER: client_id},
    )


def get_myanimelist_config(
    *,
    jikan: ResilienceConfig | None = None,
    api: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
    list_page_size: int = MYANIMELIST_MAX_LIST_PAGE_SIZE,
) -> MyAnimeListConfig:
    values = require_env_vars(("KIOKU_MAL_CLIENT_ID",))
    client_id = values["KIOKU_MAL_CLIENT_ID"]
    return MyAnimeListConfig(
        client_id=client_id,
        jikan=jikan or default_jikan_resilience(cache_predicate=cache_predicate),
        api=api or default_api_resilience(client_id),
        list_page_size=list_page_size,
    )
