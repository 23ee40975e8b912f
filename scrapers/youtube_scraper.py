"""
YouTube Scraper
YouTube Data API v3 视频搜索
两步调用: search.list 取候选ID -> videos.list 批量补全统计信息
API 文档: https://developers.google.com/youtube/v3/docs
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

import httpx

from .base import BaseScraper
from config import Settings
from models import VideoCandidate
from utils.exceptions import ConfigurationError, SearchFailure


logger = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _parse_published_at(value: Any, fallback: datetime) -> datetime:
    text = str(value or "").strip()
    if not text:
        return fallback
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return fallback
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _is_video_item(item: Any) -> bool:
    """Detail items need a string id; snippet/statistics/contentDetails must be objects when present."""
    if not isinstance(item, dict):
        return False
    if not isinstance(item.get("id"), str) or not item["id"]:
        return False
    return all(
        item.get(section) is None or isinstance(item.get(section), dict)
        for section in ("snippet", "statistics", "contentDetails")
    )


class YouTubeScraper(BaseScraper[VideoCandidate]):
    """
    YouTube 视频搜索客户端

    特性:
    - 排除过短视频 (videoDuration 过滤)
    - 仅返回可嵌入视频
    - 候选顺序与供应商返回顺序一致，不在此处打分
    - 不做重试，HTTP/传输失败统一抛出 SearchFailure
    """

    def __init__(self, settings: Optional[Settings] = None, api_key: Optional[str] = None):
        super().__init__(settings)
        self.config = self.settings.youtube
        self.api_key = api_key or self.config.api_key

    @property
    def name(self) -> str:
        return "YouTube"

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self) -> None:
        if not self.is_configured():
            raise ConfigurationError("YouTube API key is not configured", {"env": "YOUTUBE_API_KEY"})

    def _get_session(self) -> httpx.AsyncClient:
        """获取或创建 HTTP 会话"""
        if self._session is None:
            self._session = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=httpx.Timeout(self.config.request_timeout),
            )
        return self._session

    async def _get_json(self, endpoint: str, params: Dict[str, Any], query: str) -> Dict[str, Any]:
        session = self._get_session()
        try:
            response = await session.get(endpoint, params={**params, "key": self.api_key})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            self._log_error(f"{endpoint} failed for '{query}' (status={status_code})", e)
            raise SearchFailure(
                f"YouTube API error: {status_code}",
                status_code=status_code,
                query=query,
            ) from e
        except httpx.HTTPError as e:
            self._log_error(f"{endpoint} transport error for '{query}'", e)
            raise SearchFailure(f"YouTube API request failed: {e}", query=query) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SearchFailure(
                "YouTube API returned invalid JSON",
                status_code=response.status_code,
                query=query,
            ) from e
        return payload if isinstance(payload, dict) else {}

    async def search(self, query: str, max_results: Optional[int] = None) -> List[VideoCandidate]:
        """
        搜索 YouTube 视频并补全统计信息

        Args:
            query: 搜索关键词
            max_results: 最大结果数 (1-50)

        Returns:
            未打分的候选视频列表; 搜索无结果时返回空列表

        Raises:
            SearchFailure: 任一调用失败
        """
        self.ensure_configured()
        if max_results is None:
            max_results = 5
        max_results = max(1, min(int(max_results), 50))

        logger.info(f"[YouTube] Searching: {query}")

        search_params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "videoDuration": self.config.video_duration,
            "maxResults": max_results,
        }
        if self.config.embeddable_only:
            search_params["videoEmbeddable"] = "true"

        search_data = await self._get_json("/search", search_params, query)
        try:
            video_ids = self._extract_video_ids(search_data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            self._log_error(f"Malformed search payload for '{query}'", e)
            raise SearchFailure("YouTube API returned a malformed search payload", query=query) from e

        if not video_ids:
            self._log_search(query, 0)
            return []

        details = await self._get_json(
            "/videos",
            {
                "part": "statistics,contentDetails,snippet",
                "id": ",".join(video_ids),
            },
            query,
        )

        now = datetime.now(timezone.utc)
        try:
            candidates = [
                self._parse_video(item, now)
                for item in _as_list(details.get("items"))
                if _is_video_item(item)
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            self._log_error(f"Malformed details payload for '{query}'", e)
            raise SearchFailure("YouTube API returned a malformed details payload", query=query) from e

        self._log_search(query, len(candidates))
        return candidates

    def _extract_video_ids(self, search_data: Dict[str, Any]) -> List[str]:
        video_ids: List[str] = []
        for item in _as_list(search_data.get("items")):
            if not isinstance(item, dict) or not isinstance(item.get("id"), dict):
                continue
            video_id = item["id"].get("videoId")
            if isinstance(video_id, str) and video_id and video_id not in video_ids:
                video_ids.append(video_id)
        return video_ids

    def _parse_video(self, item: Dict[str, Any], now: datetime) -> VideoCandidate:
        snippet = item.get("snippet") or {}
        stats = item.get("statistics") or {}
        content = item.get("contentDetails") or {}

        return VideoCandidate(
            video_id=item["id"],
            title=str(snippet.get("title") or ""),
            channel=str(snippet.get("channelTitle") or ""),
            view_count=_to_int(stats.get("viewCount")),
            like_count=_to_int(stats.get("likeCount")),
            published_at=_parse_published_at(snippet.get("publishedAt"), now),
            duration_code=str(content.get("duration") or ""),
        )
