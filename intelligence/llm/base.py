"""
Base LLM
LLM 抽象基类 (生成式规划服务的能力接口)
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum


class MessageRole(str, Enum):
    """消息角色"""
    SYSTEM = "system"
    USER = "user"


@dataclass
class Message:
    """对话消息"""
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典 (用于 API 调用)"""
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)


@dataclass
class LLMResponse:
    """LLM 响应"""
    content: str
    model: str


class BaseLLM(ABC):
    """
    LLM 抽象基类

    所有 LLM 供应商实现需继承此类。
    传输/鉴权失败直接向上抛出，由调用方归类。
    """

    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: float = 60.0,
        **kwargs,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.extra_config = kwargs

    @property
    @abstractmethod
    def provider(self) -> str:
        """返回供应商名称"""
        pass

    @abstractmethod
    async def acomplete(
        self,
        messages: List[Message],
        **kwargs,
    ) -> LLMResponse:
        """
        异步生成响应

        Args:
            messages: 对话消息列表
            **kwargs: 额外参数

        Returns:
            LLMResponse
        """
        pass

    async def achat(self, user_message: str, system_prompt: Optional[str] = None) -> str:
        """异步简单对话接口"""
        messages = []
        if system_prompt:
            messages.append(Message.system(system_prompt))
        messages.append(Message.user(user_message))

        response = await self.acomplete(messages)
        return response.content

    async def aclose(self) -> None:
        """
        关闭底层客户端资源（默认 no-op）。
        子类可覆盖以释放 HTTP 连接池。
        """
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, provider={self.provider})"
