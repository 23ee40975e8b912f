"""Unit tests for scrapers.youtube_scraper."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List

import httpx
import pytest

from config import Settings, YouTubeSettings
from scrapers import YouTubeScraper
from utils.exceptions import ConfigurationError, SearchFailure


_REAL_ASYNC_CLIENT = httpx.AsyncClient


def _settings(api_key: str = "test-key") -> Settings:
    return Settings(youtube=YouTubeSettings(api_key=api_key))


def _install_transport(monkeypatch, handler: Callable[[httpx.Request], httpx.Response]) -> None:
    monkeypatch.setattr(
        "scrapers.youtube_scraper.httpx.AsyncClient",
        lambda *args, **kwargs: _REAL_ASYNC_CLIENT(*args, transport=httpx.MockTransport(handler), **kwargs),
    )


def _search_payload(*video_ids: str) -> dict:
    return {"items": [{"id": {"kind": "youtube#video", "videoId": vid}} for vid in video_ids]}


def _video_item(video_id: str, **stats) -> dict:
    return {
        "id": video_id,
        "snippet": {
            "title": f"Title {video_id}",
            "channelTitle": f"Channel {video_id}",
            "publishedAt": "2025-06-01T08:30:00Z",
        },
        "statistics": {key: str(value) for key, value in stats.items()},
        "contentDetails": {"duration": "PT14M5S"},
    }


@pytest.mark.asyncio
async def test_search_chains_search_and_detail_calls(monkeypatch):
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/search"):
            return httpx.Response(200, json=_search_payload("abc", "def"))
        return httpx.Response(
            200,
            json={"items": [_video_item("abc", viewCount=1500, likeCount=30), _video_item("def")]},
        )

    _install_transport(monkeypatch, handler)

    async with YouTubeScraper(settings=_settings()) as scraper:
        results = await scraper.search("photosynthesis tutorial explained", max_results=5)

    assert len(requests) == 2
    search_params = requests[0].url.params
    assert requests[0].url.path == "/youtube/v3/search"
    assert search_params["q"] == "photosynthesis tutorial explained"
    assert search_params["type"] == "video"
    assert search_params["videoDuration"] == "medium"
    assert search_params["videoEmbeddable"] == "true"
    assert search_params["maxResults"] == "5"
    assert search_params["key"] == "test-key"

    detail_params = requests[1].url.params
    assert requests[1].url.path == "/youtube/v3/videos"
    assert detail_params["id"] == "abc,def"
    assert detail_params["part"] == "statistics,contentDetails,snippet"

    assert [c.video_id for c in results] == ["abc", "def"]
    first = results[0]
    assert first.title == "Title abc"
    assert first.channel == "Channel abc"
    assert first.view_count == 1500
    assert first.like_count == 30
    assert first.published_at == datetime(2025, 6, 1, 8, 30, tzinfo=timezone.utc)
    assert first.duration_code == "PT14M5S"
    assert first.duration_seconds == 845
    assert first.engagement_score is None
    # Missing statistics default to zero.
    assert results[1].view_count == 0
    assert results[1].like_count == 0


@pytest.mark.asyncio
async def test_search_without_ids_returns_empty_list(monkeypatch):
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"items": []})

    _install_transport(monkeypatch, handler)

    async with YouTubeScraper(settings=_settings()) as scraper:
        assert await scraper.search("nothing matches") == []
    assert len(requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("failing_endpoint", ["/search", "/videos"])
async def test_http_status_error_raises_search_failure(monkeypatch, failing_endpoint):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(failing_endpoint):
            return httpx.Response(403, json={"error": {"message": "quotaExceeded"}})
        if request.url.path.endswith("/search"):
            return httpx.Response(200, json=_search_payload("abc"))
        return httpx.Response(200, json={"items": [_video_item("abc")]})

    _install_transport(monkeypatch, handler)

    async with YouTubeScraper(settings=_settings()) as scraper:
        with pytest.raises(SearchFailure) as exc_info:
            await scraper.search("photosynthesis")

    assert exc_info.value.status_code == 403
    assert exc_info.value.query == "photosynthesis"


@pytest.mark.asyncio
async def test_transport_error_raises_search_failure_without_status(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _install_transport(monkeypatch, handler)

    async with YouTubeScraper(settings=_settings()) as scraper:
        with pytest.raises(SearchFailure) as exc_info:
            await scraper.search("photosynthesis")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_missing_api_key_is_a_configuration_error():
    scraper = YouTubeScraper(settings=_settings(api_key=""))
    assert not scraper.is_configured()
    with pytest.raises(ConfigurationError):
        await scraper.search("photosynthesis")


@pytest.mark.asyncio
async def test_unparsable_fields_fall_back_to_defaults(monkeypatch):
    item = _video_item("abc", viewCount="n/a", likeCount=-5)
    item["snippet"]["publishedAt"] = "not-a-date"
    item["contentDetails"] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search"):
            return httpx.Response(200, json=_search_payload("abc"))
        return httpx.Response(200, json={"items": [item]})

    _install_transport(monkeypatch, handler)

    before = datetime.now(timezone.utc)
    async with YouTubeScraper(settings=_settings()) as scraper:
        results = await scraper.search("photosynthesis")

    assert results[0].view_count == 0
    assert results[0].like_count == 0
    assert results[0].published_at >= before
    assert results[0].duration_code == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "search_payload",
    [
        {"items": [{"id": "abc"}, "junk"]},
        {"items": {"id": {"videoId": "abc"}}},
        {"items": "abc"},
        {"items": [None, 7, {"id": {"videoId": 42}}]},
    ],
)
async def test_malformed_search_items_are_skipped(monkeypatch, search_payload):
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=search_payload)

    _install_transport(monkeypatch, handler)

    async with YouTubeScraper(settings=_settings()) as scraper:
        assert await scraper.search("photosynthesis") == []
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_malformed_detail_items_are_skipped(monkeypatch):
    bad_snippet = _video_item("bad1")
    bad_snippet["snippet"] = "not an object"
    bad_stats = _video_item("bad2")
    bad_stats["statistics"] = ["1000"]
    bad_content = _video_item("bad3")
    bad_content["contentDetails"] = 12

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search"):
            return httpx.Response(200, json=_search_payload("good", "bad1", "bad2", "bad3"))
        return httpx.Response(
            200,
            json={
                "items": [
                    "junk",
                    {"id": {"videoId": "good"}},
                    bad_snippet,
                    bad_stats,
                    bad_content,
                    _video_item("good", viewCount=10),
                ]
            },
        )

    _install_transport(monkeypatch, handler)

    async with YouTubeScraper(settings=_settings()) as scraper:
        results = await scraper.search("photosynthesis")

    assert [c.video_id for c in results] == ["good"]


@pytest.mark.asyncio
async def test_detail_items_that_are_not_a_list_yield_no_candidates(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search"):
            return httpx.Response(200, json=_search_payload("abc"))
        return httpx.Response(200, json={"items": "oops"})

    _install_transport(monkeypatch, handler)

    async with YouTubeScraper(settings=_settings()) as scraper:
        assert await scraper.search("photosynthesis") == []


@pytest.mark.asyncio
async def test_unexpected_shape_error_is_wrapped_in_search_failure(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search"):
            return httpx.Response(200, json=_search_payload("abc"))
        return httpx.Response(200, json={"items": [_video_item("abc")]})

    def _broken_parse(self, item, now):
        raise AttributeError("'str' object has no attribute 'get'")

    _install_transport(monkeypatch, handler)
    monkeypatch.setattr(YouTubeScraper, "_parse_video", _broken_parse)

    async with YouTubeScraper(settings=_settings()) as scraper:
        with pytest.raises(SearchFailure) as exc_info:
            await scraper.search("photosynthesis")

    assert exc_info.value.query == "photosynthesis"
    assert isinstance(exc_info.value.__cause__, AttributeError)
