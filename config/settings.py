"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMSettings(BaseSettings):
    """LLM 配置 (topic planning)"""
    provider: str = Field(default="gateway", description="LLM提供商: openai, gateway")
    model_name: Optional[str] = Field(default=None, description="模型名称(不填则使用默认)")
    base_url: Optional[str] = Field(default=None, description="OpenAI 兼容网关地址")
    temperature: float = Field(default=0.7, description="生成温度")
    max_tokens: int = Field(default=2048, description="最大生成token数")
    timeout: float = Field(default=60.0, description="请求超时时间(秒)")

    # API Keys
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    gateway_api_key: Optional[str] = Field(default=None, description="AI Gateway API Key")

    class Config:
        env_prefix = "LLM_"


class YouTubeSettings(BaseSettings):
    """YouTube Data API v3 配置"""
    api_key: Optional[str] = Field(default=None, description="YouTube Data API Key")
    base_url: str = Field(
        default="https://www.googleapis.com/youtube/v3",
        description="YouTube Data API 根地址",
    )
    request_timeout: float = Field(default=30.0, description="请求超时时间(秒)")
    video_duration: str = Field(default="medium", description="时长过滤: any, short, medium, long")
    embeddable_only: bool = Field(default=True, description="仅返回可嵌入的视频")

    class Config:
        env_prefix = "YOUTUBE_"


class DiscoverySettings(BaseSettings):
    """视频发现与排序配置"""
    main_max_results: int = Field(default=5, ge=1, le=50, description="主查询候选数")
    subtask_max_results: int = Field(default=5, ge=1, le=50, description="每个子任务候选数")
    max_subtasks: int = Field(default=5, ge=1, le=5, description="最多子任务数")
    max_topic_length: int = Field(default=500, ge=1, description="主题最大长度")

    class Config:
        env_prefix = "DISCOVERY_"


class WebAppSettings(BaseSettings):
    """Web 服务配置"""
    host: str = Field(default="0.0.0.0", description="监听地址")
    port: int = Field(default=8000, description="监听端口")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="允许的跨域来源")

    class Config:
        env_prefix = "WEBAPP_"


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""

    llm: LLMSettings = Field(default_factory=LLMSettings)
    youtube: YouTubeSettings = Field(default_factory=YouTubeSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    webapp: WebAppSettings = Field(default_factory=WebAppSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            # 默认查找 config/.env
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            llm=LLMSettings(),
            youtube=YouTubeSettings(),
            discovery=DiscoverySettings(),
            webapp=WebAppSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


# 便捷访问
def get_llm_settings() -> LLMSettings:
    return get_settings().llm


def get_youtube_settings() -> YouTubeSettings:
    return get_settings().youtube


def get_discovery_settings() -> DiscoverySettings:
    return get_settings().discovery


def get_webapp_settings() -> WebAppSettings:
    return get_settings().webapp
