"""
Utils Module
通用工具函数
"""
from .logger import setup_logger, setup_package_loggers, get_logger
from .exceptions import (
    DiscoveryError,
    ConfigurationError,
    InputError,
    PlannerParseError,
    UpstreamPlanningError,
    SearchFailure,
    NoPrimaryVideoFound,
)

__all__ = [
    "setup_logger",
    "setup_package_loggers",
    "get_logger",
    "DiscoveryError",
    "ConfigurationError",
    "InputError",
    "PlannerParseError",
    "UpstreamPlanningError",
    "SearchFailure",
    "NoPrimaryVideoFound",
]
