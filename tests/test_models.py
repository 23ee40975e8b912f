from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import (
    DiscoveryResult,
    PlannerOutput,
    PrimaryVideo,
    RankedVideo,
    Subtask,
    SubtaskResult,
    format_view_count,
    parse_iso_duration,
)


@pytest.mark.parametrize(
    "count,expected",
    [(0, "0"), (999, "999"), (1_000, "1.0K"), (45_678, "45.7K"), (1_000_000, "1.0M"), (12_340_000, "12.3M")],
)
def test_format_view_count(count: int, expected: str) -> None:
    assert format_view_count(count) == expected


@pytest.mark.parametrize(
    "code,seconds",
    [("PT4M13S", 253), ("PT1H2M3S", 3723), ("PT45S", 45), ("P1DT1H", 90_000), ("", 0), ("garbage", 0)],
)
def test_parse_iso_duration(code: str, seconds: int) -> None:
    assert parse_iso_duration(code) == seconds


def test_planner_output_accepts_wire_aliases() -> None:
    plan = PlannerOutput.model_validate(
        {"subtasks": [{"title": "Intro", "searchQuery": "intro tutorial"}], "mainSearchQuery": "topic explained"}
    )
    assert plan.subtasks[0].search_query == "intro tutorial"
    assert plan.main_search_query == "topic explained"


def test_planner_output_enforces_subtask_bounds() -> None:
    with pytest.raises(ValidationError):
        PlannerOutput(subtasks=[], main_search_query="q")
    with pytest.raises(ValidationError):
        PlannerOutput(
            subtasks=[Subtask(title=f"t{i}", search_query=f"q{i}") for i in range(6)],
            main_search_query="q",
        )


def test_discovery_result_to_response_uses_wire_names() -> None:
    result = DiscoveryResult(
        primary_video=PrimaryVideo(video_id="abc", title="T", channel="C", reason="R"),
        subtasks=[
            SubtaskResult(
                title="Intro",
                description="intro tutorial",
                videos=[
                    RankedVideo(
                        video_id="v1",
                        title="V1",
                        channel="C1",
                        views="1.2K",
                        engagement_score=7,
                        reason="Highest engagement for this topic",
                    )
                ],
            )
        ],
    )
    assert result.to_response() == {
        "videoId": "abc",
        "title": "T",
        "channel": "C",
        "reason": "R",
        "subtasks": [
            {
                "title": "Intro",
                "description": "intro tutorial",
                "videos": [
                    {
                        "videoId": "v1",
                        "title": "V1",
                        "channel": "C1",
                        "views": "1.2K",
                        "engagementScore": 7,
                        "reason": "Highest engagement for this topic",
                    }
                ],
            }
        ],
    }
