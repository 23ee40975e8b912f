"""
Base Scraper
所有搜索客户端的抽象基类
"""
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar
import logging

from config import Settings, get_settings


logger = logging.getLogger(__name__)

T = TypeVar("T")  # 泛型返回类型


class BaseScraper(ABC, Generic[T]):
    """
    搜索客户端抽象基类
    所有具体客户端都需要继承此类并实现抽象方法
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._session = None

    @property
    @abstractmethod
    def name(self) -> str:
        """返回客户端名称"""
        pass

    @abstractmethod
    async def search(self, query: str, max_results: Optional[int] = None) -> List[T]:
        """
        搜索接口

        Args:
            query: 搜索关键词
            max_results: 最大返回结果数

        Returns:
            搜索结果列表
        """
        pass

    def is_configured(self) -> bool:
        """
        检查是否已正确配置
        子类可以覆盖此方法来检查必要的API密钥等
        """
        return True

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()

    async def close(self):
        """清理资源"""
        if self._session is not None:
            await self._session.aclose()
            self._session = None

    def _log_search(self, query: str, count: int):
        """记录搜索日志"""
        logger.info(f"[{self.name}] Search '{query}' returned {count} results")

    def _log_error(self, message: str, error: Exception):
        """记录错误日志"""
        logger.error(f"[{self.name}] {message}: {error}")
