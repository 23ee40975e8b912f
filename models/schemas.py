"""
Data Models / Schemas
定义视频发现流程的统一数据结构 (均为请求级、不可变)
"""
from datetime import datetime
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


_ISO_DURATION_RE = re.compile(r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?")


def parse_iso_duration(duration: str) -> int:
    """Parse an ISO 8601 duration (PT1H2M3S) to seconds; 0 when unparsable."""
    match = _ISO_DURATION_RE.fullmatch(str(duration or "").strip())
    if not match:
        return 0
    days, hours, minutes, seconds = (int(part or 0) for part in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def format_view_count(count: int) -> str:
    """1234567 -> '1.2M', 4321 -> '4.3K', 999 -> '999'."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Subtask(_Frozen):
    """课程子任务 (子主题 + 检索词)"""
    title: StrictStr = Field(..., description="子任务标题")
    search_query: StrictStr = Field(..., alias="searchQuery", description="子任务检索词")

    @field_validator("title", "search_query")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must be a non-empty string")
        return text


class PlannerOutput(_Frozen):
    """主题拆解结果"""
    subtasks: List[Subtask] = Field(..., min_length=1, max_length=5, description="有序子任务")
    main_search_query: StrictStr = Field(..., alias="mainSearchQuery", description="主题检索词")

    @field_validator("main_search_query")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must be a non-empty string")
        return text


class VideoCandidate(_Frozen):
    """搜索返回的原始候选视频; engagement_score 仅在打分后出现"""
    video_id: str = Field(..., description="视频ID (单次搜索结果内唯一)")
    title: str = Field(default="", description="标题")
    channel: str = Field(default="", description="频道名")
    view_count: int = Field(default=0, ge=0, description="播放量")
    like_count: int = Field(default=0, ge=0, description="点赞数")
    published_at: datetime = Field(..., description="发布时间 (UTC)")
    duration_code: str = Field(default="", description="ISO 8601 时长")
    engagement_score: Optional[int] = Field(default=None, description="互动分 [1, 100]")

    @property
    def is_scored(self) -> bool:
        return self.engagement_score is not None

    @property
    def duration_seconds(self) -> int:
        return parse_iso_duration(self.duration_code)

    @property
    def formatted_views(self) -> str:
        return format_view_count(self.view_count)

    def with_score(self, score: int) -> "VideoCandidate":
        if self.engagement_score is not None:
            raise ValueError(f"engagement score already set for video {self.video_id}")
        return self.model_copy(update={"engagement_score": score})


class RankedVideo(_Frozen):
    """子任务下的排序视频"""
    video_id: str = Field(..., alias="videoId")
    title: str
    channel: str
    views: str = Field(..., description="格式化播放量")
    engagement_score: int = Field(..., alias="engagementScore")
    reason: str

    @classmethod
    def from_candidate(cls, candidate: VideoCandidate, reason: str) -> "RankedVideo":
        if not candidate.is_scored:
            raise ValueError(f"video {candidate.video_id} has not been scored")
        return cls(
            video_id=candidate.video_id,
            title=candidate.title,
            channel=candidate.channel,
            views=candidate.formatted_views,
            engagement_score=candidate.engagement_score,
            reason=reason,
        )


class SubtaskResult(_Frozen):
    title: str
    description: str = ""
    videos: List[RankedVideo] = Field(default_factory=list)


class PrimaryVideo(_Frozen):
    video_id: str = Field(..., alias="videoId")
    title: str
    channel: str
    reason: str


class DiscoveryResult(_Frozen):
    """对外唯一可见的结果; 每个请求只构造一次"""
    primary_video: PrimaryVideo
    subtasks: List[SubtaskResult] = Field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        """Flatten into the wire body: primary fields at top level plus subtasks."""
        payload = self.primary_video.model_dump(by_alias=True)
        payload["subtasks"] = [item.model_dump(by_alias=True) for item in self.subtasks]
        return payload
