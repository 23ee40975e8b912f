"""
Discovery Module
视频发现与排序引擎
"""
from .scoring import engagement_score, score_candidates, select_primary
from .assembler import ResultAssembler, validate_topic
from .service import build_assembler, find_videos

__all__ = [
    "engagement_score",
    "score_candidates",
    "select_primary",
    "ResultAssembler",
    "validate_topic",
    "build_assembler",
    "find_videos",
]
