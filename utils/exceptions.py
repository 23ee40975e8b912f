"""
Custom Exceptions
自定义异常类
"""
from typing import Optional


class DiscoveryError(Exception):
    """视频发现引擎基础异常类"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(DiscoveryError):
    """配置错误 (缺少 API Key 等)"""
    pass


class InputError(DiscoveryError):
    """请求输入错误 (主题缺失/为空/非法)"""
    pass


class PlannerParseError(DiscoveryError):
    """规划响应无法解析，总是在本地以兜底计划恢复"""

    def __init__(self, message: str, raw_content: str = "", **kwargs):
        super().__init__(message, kwargs)
        self.raw_content = raw_content


class UpstreamPlanningError(DiscoveryError):
    """生成式规划服务调用失败 (传输/鉴权/限流/额度)"""

    RATE_LIMITED = "rate_limited"
    QUOTA_EXCEEDED = "quota_exceeded"
    UPSTREAM = "upstream"

    def __init__(
        self,
        message: str,
        kind: str = UPSTREAM,
        status_code: Optional[int] = None,
        provider: str = None,
        **kwargs,
    ):
        super().__init__(message, kwargs)
        self.kind = kind
        self.status_code = status_code
        self.provider = provider

    @classmethod
    def from_status(cls, status_code: Optional[int], message: str, provider: str = None) -> "UpstreamPlanningError":
        """按供应商 HTTP 状态码归类"""
        if status_code == 429:
            kind = cls.RATE_LIMITED
        elif status_code == 402:
            kind = cls.QUOTA_EXCEEDED
        else:
            kind = cls.UPSTREAM
        return cls(message, kind=kind, status_code=status_code, provider=provider)

    @property
    def is_rate_limited(self) -> bool:
        return self.kind == self.RATE_LIMITED

    @property
    def is_quota_exceeded(self) -> bool:
        return self.kind == self.QUOTA_EXCEEDED


class SearchFailure(DiscoveryError):
    """视频搜索供应商调用失败"""

    def __init__(self, message: str, status_code: Optional[int] = None, query: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.status_code = status_code
        self.query = query


class NoPrimaryVideoFound(DiscoveryError):
    """主查询没有任何可用候选视频"""
    pass
