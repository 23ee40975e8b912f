"""
Scrapers Module
"""
from .base import BaseScraper
from .youtube_scraper import YouTubeScraper

__all__ = [
    "BaseScraper",
    "YouTubeScraper",
]
