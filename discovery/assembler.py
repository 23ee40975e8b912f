"""Topic -> curriculum -> ranked videos orchestration."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import re
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from models import (
    DiscoveryResult,
    PlannerOutput,
    PrimaryVideo,
    RankedVideo,
    Subtask,
    SubtaskResult,
    VideoCandidate,
)
from discovery.scoring import score_candidates, select_primary
from utils.exceptions import InputError, NoPrimaryVideoFound, SearchFailure


logger = logging.getLogger(__name__)

TOP_REASON = "Highest engagement for this topic"

_FORBIDDEN_TOPIC_PATTERNS = [
    re.compile(r"ignore\s+(all\s+)?previous\s+instructions", re.IGNORECASE),
    re.compile(r"disregard\s+(all\s+)?previous", re.IGNORECASE),
    re.compile(r"forget\s+(all\s+)?previous", re.IGNORECASE),
    re.compile(r"system\s*:\s*", re.IGNORECASE),
    re.compile(r"\[\s*INST\s*\]", re.IGNORECASE),
    re.compile(r"<\s*\|\s*im_(start|end)\s*\|\s*>", re.IGNORECASE),
    re.compile(r"\{\{\s*system", re.IGNORECASE),
    re.compile(r"pretend\s+you\s+are", re.IGNORECASE),
    re.compile(r"you\s+are\s+now", re.IGNORECASE),
    re.compile(r"(new|override)\s+instructions", re.IGNORECASE),
]


class PlanningService(Protocol):
    async def plan(self, topic: str) -> PlannerOutput:
        ...


class SearchService(Protocol):
    async def search(self, query: str, max_results: Optional[int] = None) -> List[VideoCandidate]:
        ...


def validate_topic(topic: object, max_length: int = 500) -> str:
    """Trim and reject missing, oversized or prompt-injection topics."""
    if not isinstance(topic, str) or not topic.strip():
        raise InputError("Topic is required")
    text = topic.strip()
    if len(text) > max_length:
        raise InputError(f"Topic exceeds maximum length of {max_length} characters")
    for pattern in _FORBIDDEN_TOPIC_PATTERNS:
        if pattern.search(text):
            logger.warning(f"Rejected topic with injection marker: {text[:50]!r}")
            raise InputError("Invalid input detected")
    return text


def rank_reason(rank: int) -> str:
    return TOP_REASON if rank == 0 else f"Recommended video #{rank + 1}"


def primary_reason(topic: str, video: VideoCandidate) -> str:
    return f'Best educational video for "{topic}" with {video.formatted_views} views'


class ResultAssembler:
    """Builds a DiscoveryResult from a planner and a video search service."""

    def __init__(
        self,
        planner: PlanningService,
        search_client: SearchService,
        *,
        main_max_results: int = 5,
        subtask_max_results: int = 5,
        max_subtasks: int = 5,
        max_topic_length: int = 500,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.planner = planner
        self.search_client = search_client
        self.main_max_results = main_max_results
        self.subtask_max_results = subtask_max_results
        self.max_subtasks = max_subtasks
        self.max_topic_length = max_topic_length
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def assemble(self, topic: str) -> DiscoveryResult:
        """
        Raises:
            InputError: topic missing or rejected
            UpstreamPlanningError: planning service failed (propagated unchanged)
            NoPrimaryVideoFound: main search failed or returned nothing
        """
        topic = validate_topic(topic, self.max_topic_length)
        logger.info(f"Finding videos for topic: {topic}")

        plan = await self.planner.plan(topic)
        now = self._clock()

        primary = await self._find_primary(topic, plan.main_search_query, now)
        subtasks = await self._search_subtasks(plan.subtasks[: self.max_subtasks], now)

        logger.info(
            f"Assembled '{topic}': primary={primary.video_id}, "
            f"{len(subtasks)} subtasks, {sum(len(s.videos) for s in subtasks)} videos"
        )
        return DiscoveryResult(
            primary_video=PrimaryVideo(
                video_id=primary.video_id,
                title=primary.title,
                channel=primary.channel,
                reason=primary_reason(topic, primary),
            ),
            subtasks=subtasks,
        )

    async def _find_primary(self, topic: str, query: str, now: datetime) -> VideoCandidate:
        try:
            candidates = await self.search_client.search(query, self.main_max_results)
        except SearchFailure as exc:
            logger.error(f"Main search failed for '{query}': {exc}")
            raise NoPrimaryVideoFound(
                "No videos found for this topic",
                {"query": query, "status_code": exc.status_code},
            ) from exc

        primary = select_primary(score_candidates(candidates, now))
        if primary is None:
            raise NoPrimaryVideoFound("No videos found for this topic", {"query": query})
        return primary

    async def _search_subtask(
        self,
        index: int,
        subtask: Subtask,
        now: datetime,
    ) -> Tuple[int, SubtaskResult]:
        videos: List[RankedVideo] = []
        try:
            candidates = await self.search_client.search(subtask.search_query, self.subtask_max_results)
        except SearchFailure as exc:
            logger.error(f"Error searching for subtask '{subtask.title}': {exc}")
        else:
            ranked = score_candidates(candidates, now)[: self.subtask_max_results]
            videos = [
                RankedVideo.from_candidate(candidate, rank_reason(rank))
                for rank, candidate in enumerate(ranked)
            ]
        return index, SubtaskResult(
            title=subtask.title,
            description=subtask.search_query,
            videos=videos,
        )

    async def _search_subtasks(self, subtasks: Sequence[Subtask], now: datetime) -> List[SubtaskResult]:
        outcomes = await asyncio.gather(
            *(self._search_subtask(index, subtask, now) for index, subtask in enumerate(subtasks)),
            return_exceptions=True,
        )
        merged: List[Tuple[int, SubtaskResult]] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
            merged.append(outcome)
        merged.sort(key=lambda pair: pair[0])
        return [result for _, result in merged]

    async def aclose(self) -> None:
        for collaborator in (self.planner, self.search_client):
            close = getattr(collaborator, "aclose", None) or getattr(collaborator, "close", None)
            if close is not None:
                await close()
