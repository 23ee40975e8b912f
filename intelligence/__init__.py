"""
Intelligence Module
智能层 - LLM 抽象 + 主题规划
"""
from .llm import BaseLLM, OpenAILLM, get_llm
from .agents import TopicPlanner, build_fallback_plan

__all__ = [
    "BaseLLM",
    "OpenAILLM",
    "get_llm",
    "TopicPlanner",
    "build_fallback_plan",
]
