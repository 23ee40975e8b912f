"""
Configuration Management Module
统一配置管理，实现API配置解耦
"""
from .settings import (
    Settings,
    LLMSettings,
    YouTubeSettings,
    DiscoverySettings,
    WebAppSettings,
    get_settings,
    get_llm_settings,
    get_youtube_settings,
    get_discovery_settings,
    get_webapp_settings,
)

__all__ = [
    "Settings",
    "LLMSettings",
    "YouTubeSettings",
    "DiscoverySettings",
    "WebAppSettings",
    "get_settings",
    "get_llm_settings",
    "get_youtube_settings",
    "get_discovery_settings",
    "get_webapp_settings",
]
