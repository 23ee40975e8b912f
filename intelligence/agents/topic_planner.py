"""
Topic Planner
课程规划层：把学习主题拆解为 1-5 个有序子任务与一个主检索词。
"""

from __future__ import annotations

from typing import Any, Dict, Optional
import json
import logging
import re

from pydantic import ValidationError

from intelligence.llm import BaseLLM, get_llm
from models import PlannerOutput, Subtask
from utils.exceptions import PlannerParseError, UpstreamPlanningError


logger = logging.getLogger(__name__)

MAX_SUBTASKS = 5

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")

_PLANNER_SYSTEM_PROMPT = """You are an educational content planner. Break down learning topics into 3-5 logical subtasks/subtopics that someone would need to learn to master the main topic.

You must respond with ONLY a valid JSON object, no markdown, no code blocks.
The JSON must have this exact structure:
{
  "subtasks": [
    {
      "title": "Subtask title",
      "searchQuery": "optimized YouTube search query for this subtask"
    }
  ],
  "mainSearchQuery": "best YouTube search query for the main topic"
}"""

_PLANNER_USER_PROMPT = """Topic: "{topic}"

Break this into 3-5 subtasks and provide optimized YouTube search queries for educational videos on each. Add "tutorial", "explained", or "for beginners" to make searches more educational."""


def build_fallback_plan(topic: str) -> PlannerOutput:
    """Deterministic three-step plan used whenever the planner output is unusable."""
    topic = str(topic or "").strip()
    return PlannerOutput(
        subtasks=[
            Subtask(title=f"Introduction to {topic}", search_query=f"{topic} introduction tutorial"),
            Subtask(title=f"Core concepts of {topic}", search_query=f"{topic} explained for beginners"),
            Subtask(title=f"Practice {topic}", search_query=f"{topic} examples practice"),
        ],
        main_search_query=f"{topic} tutorial explained",
    )


def strip_code_fences(text: str) -> str:
    raw = str(text or "").strip()
    raw = _FENCE_OPEN_RE.sub("", raw, count=1)
    raw = _FENCE_CLOSE_RE.sub("", raw, count=1)
    return raw.strip()


def parse_plan(content: str, max_subtasks: int = MAX_SUBTASKS) -> PlannerOutput:
    """
    解析并严格校验规划响应

    Raises:
        PlannerParseError: 非 JSON、结构不符或子任务为空
    """
    cleaned = strip_code_fences(content)
    if not cleaned:
        raise PlannerParseError("Empty planner response", raw_content=str(content or ""))

    try:
        parsed: Any = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise PlannerParseError(f"Planner response is not valid JSON: {exc}", raw_content=cleaned) from exc

    if not isinstance(parsed, dict):
        raise PlannerParseError("Planner response is not a JSON object", raw_content=cleaned)

    payload: Dict[str, Any] = dict(parsed)
    subtasks = payload.get("subtasks")
    if isinstance(subtasks, list):
        payload["subtasks"] = subtasks[:max_subtasks]

    try:
        return PlannerOutput.model_validate(payload)
    except ValidationError as exc:
        raise PlannerParseError(
            f"Planner response failed validation ({exc.error_count()} errors)",
            raw_content=cleaned,
        ) from exc


class TopicPlanner:
    """Decomposes a learning topic into an ordered curriculum via a generative service."""

    def __init__(self, llm: Optional[BaseLLM] = None, max_subtasks: int = MAX_SUBTASKS):
        self._llm = llm
        self.max_subtasks = max(1, min(int(max_subtasks), MAX_SUBTASKS))

    @property
    def llm(self) -> BaseLLM:
        if self._llm is None:
            self._llm = get_llm()
        return self._llm

    async def _request_plan(self, topic: str) -> str:
        llm = self.llm
        try:
            return await llm.achat(
                _PLANNER_USER_PROMPT.format(topic=topic),
                system_prompt=_PLANNER_SYSTEM_PROMPT,
            )
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            logger.error(f"Planning service error (status={status_code}): {exc}")
            raise UpstreamPlanningError.from_status(
                status_code,
                f"Planning service request failed: {exc}",
                provider=getattr(llm, "provider", None),
            ) from exc

    async def plan(self, topic: str) -> PlannerOutput:
        """
        生成主题拆解计划

        Args:
            topic: 已去除首尾空白的非空主题

        Returns:
            PlannerOutput (1-5 个子任务)

        Raises:
            UpstreamPlanningError: 规划服务传输/鉴权/限流/额度失败
        """
        content = await self._request_plan(topic)
        logger.debug(f"Planner raw response: {content!r}")

        try:
            plan = parse_plan(content, max_subtasks=self.max_subtasks)
        except PlannerParseError as exc:
            logger.warning(f"TopicPlanner fallback for '{topic}': {exc.message}")
            return build_fallback_plan(topic)

        logger.info(f"Planned {len(plan.subtasks)} subtasks for '{topic}'")
        return plan

    async def aclose(self) -> None:
        if self._llm is not None:
            await self._llm.aclose()
