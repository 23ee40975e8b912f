"""
LLM Factory
工厂函数 - 根据配置自动创建 LLM 实例
"""
from typing import Optional
import logging

from utils.exceptions import ConfigurationError

from .base import BaseLLM
from .openai_llm import OpenAILLM


logger = logging.getLogger(__name__)


# 默认模型配置
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gateway": "google/gemini-2.5-flash",
}

DEFAULT_BASE_URLS = {
    "openai": None,
    "gateway": "https://ai.gateway.lovable.dev/v1",
}


def get_llm(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    **kwargs,
) -> BaseLLM:
    """
    获取 LLM 实例

    自动从 .env 读取配置，也可手动指定

    Args:
        provider: LLM 供应商 (openai, gateway)
        model: 模型名称 (不传则使用默认)
        **kwargs: 额外参数 (temperature, max_tokens, api_key, base_url 等)

    Returns:
        BaseLLM 实例

    Example:
        # 使用 .env 配置
        llm = get_llm()

        # 指定供应商与模型
        llm = get_llm(provider="openai", model="gpt-4o")
    """
    from config import get_llm_settings

    settings = get_llm_settings()

    provider = (provider or settings.provider or "").strip().lower()
    if provider not in DEFAULT_MODELS:
        raise ValueError(f"Unsupported LLM provider: {provider}")

    model = model or settings.model_name or DEFAULT_MODELS[provider]

    api_keys = {
        "openai": settings.openai_api_key,
        "gateway": settings.gateway_api_key,
    }
    api_key = kwargs.pop("api_key", None) or api_keys.get(provider)
    if not api_key:
        raise ConfigurationError(
            f"{provider} API key is not configured",
            {"env": f"LLM_{provider.upper()}_API_KEY"},
        )

    base_url = kwargs.pop("base_url", None) or settings.base_url or DEFAULT_BASE_URLS[provider]

    # 合并默认参数
    default_params = {
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
        "timeout": settings.timeout,
    }
    for key, value in default_params.items():
        if key not in kwargs:
            kwargs[key] = value

    logger.debug(f"Creating LLM provider={provider} model={model}")
    return OpenAILLM(
        model=model,
        api_key=api_key,
        base_url=base_url,
        provider_name=provider,
        **kwargs,
    )
