"""
Agents Module
"""
from .topic_planner import TopicPlanner, build_fallback_plan, parse_plan, strip_code_fences

__all__ = [
    "TopicPlanner",
    "build_fallback_plan",
    "parse_plan",
    "strip_code_fences",
]
