"""
Data Models
"""
from .schemas import (
    Subtask,
    PlannerOutput,
    VideoCandidate,
    RankedVideo,
    SubtaskResult,
    PrimaryVideo,
    DiscoveryResult,
    format_view_count,
    parse_iso_duration,
)

__all__ = [
    "Subtask",
    "PlannerOutput",
    "VideoCandidate",
    "RankedVideo",
    "SubtaskResult",
    "PrimaryVideo",
    "DiscoveryResult",
    "format_view_count",
    "parse_iso_duration",
]
