"""
OpenAI LLM
OpenAI Chat Completions 实现，亦可通过 base_url 对接任意 OpenAI 兼容网关
"""
from typing import List, Optional
import logging

from .base import BaseLLM, Message, LLMResponse


logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """
    OpenAI LLM 实现

    支持:
    - 官方 OpenAI 模型 (gpt-4o-mini 等)
    - OpenAI 兼容网关 (provider="gateway"，例如 google/gemini-2.5-flash)
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: float = 60.0,
        provider_name: str = "openai",
        **kwargs,
    ):
        super().__init__(model, temperature, max_tokens, timeout, **kwargs)
        self.api_key = api_key
        self.base_url = base_url
        self._provider_name = provider_name
        self._async_client = None

    @property
    def provider(self) -> str:
        return self._provider_name

    def _get_async_client(self):
        """获取异步客户端"""
        if self._async_client is None:
            from openai import AsyncOpenAI
            self._async_client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                # 重试由调用方决定，规划层不做自动重试
                max_retries=0,
            )
        return self._async_client

    async def acomplete(
        self,
        messages: List[Message],
        **kwargs,
    ) -> LLMResponse:
        """异步生成响应"""
        client = self._get_async_client()

        request_params = {
            "model": self.model,
            "messages": [m.to_dict() for m in messages],
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }

        response = await client.chat.completions.create(**request_params)

        choice = response.choices[0] if response.choices else None
        content = (choice.message.content if choice else None) or ""
        return LLMResponse(content=content, model=response.model)

    async def aclose(self) -> None:
        client = self._async_client
        if client is None:
            return
        self._async_client = None
        await client.close()
