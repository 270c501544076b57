from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, cast

import httpx
import pytest

from kioku.adapters.http_resilience import (
    RateLimit,
    ResilienceConfig,
    ResilientClient,
    RetryPolicy,
    _ShouldCacheResponseFilter,  # noqa: PLC2701  # type: ignore[reportPrivateUsage]
    build_retry,
)
from kioku.adapters.myanimelist.client import (
    _should_cache_payload,  # noqa: PLC2701  # type: ignore[reportPrivateUsage]
)

if TYPE_CHECKING:
    from hishel import Response as HishelCacheResponse


def test_build_retry_copies_policy() -> None:
    policy = RetryPolicy(total=2, status_forcelist=frozenset({429}))

    retry = build_retry(policy)

    assert retry.total == 2
    assert retry.is_retryable_status_code(429)
    assert not retry.is_retryable_status_code(500)


def _jikan_filter() -> _ShouldCacheResponseFilter:
    return _ShouldCacheResponseFilter(_should_cache_payload)


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        (b'{"data": {"mal_id": 1}}', True),
        (b'{"status": 500, "type": "UpstreamException"}', False),
        (b"<html>maintenance</html>", False),
        (b"\xff\xfe", False),
        (None, False),
    ],
)
def test_cache_filter_stores_only_data_envelopes(
    body: bytes | None,
    expected: bool,  # noqa: FBT001
) -> None:
    item = cast("HishelCacheResponse", None)

    assert _jikan_filter().apply(item, body) is expected


def test_rate_limited_client_sends_requests() -> None:
    seen: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    async def run() -> list[int]:
        config = ResilienceConfig(
            name="test",
            base_url="https://example.invalid/api",
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=None,
        )
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
                base_url="https://example.invalid/api",
                transport=httpx.MockTransport(handler),
            )
            responses = [await client.get(f"item/{index}") for index in range(3)]
        return [response.status_code for response in responses]

    assert asyncio.run(run()) == [200, 200, 200]
    assert seen == ["/api/item/0", "/api/item/1", "/api/item/2"]
