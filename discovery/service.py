"""Wires configured collaborators into a ResultAssembler."""

from __future__ import annotations

from typing import Optional

from config import Settings, get_settings
from discovery.assembler import ResultAssembler
from intelligence.agents import TopicPlanner
from intelligence.llm import BaseLLM
from models import DiscoveryResult
from scrapers import YouTubeScraper


def build_assembler(
    settings: Optional[Settings] = None,
    llm: Optional[BaseLLM] = None,
) -> ResultAssembler:
    """Request-scoped assembler; the LLM client is created on first use."""
    settings = settings or get_settings()
    discovery = settings.discovery
    return ResultAssembler(
        planner=TopicPlanner(llm=llm, max_subtasks=discovery.max_subtasks),
        search_client=YouTubeScraper(settings=settings),
        main_max_results=discovery.main_max_results,
        subtask_max_results=discovery.subtask_max_results,
        max_subtasks=discovery.max_subtasks,
        max_topic_length=discovery.max_topic_length,
    )


async def find_videos(topic: str, settings: Optional[Settings] = None) -> DiscoveryResult:
    assembler = build_assembler(settings)
    try:
        return await assembler.assemble(topic)
    finally:
        await assembler.aclose()
