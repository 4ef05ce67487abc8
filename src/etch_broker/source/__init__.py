"""etch 캐시 서버 연동 (스레드 목록, 레코드 피드, 이벤트 스트림)."""

from .client import SourceClient
from .config import RetryPolicy, SourceConfig
from .events import EventDecoder

__all__ = [
    "SourceClient",
    "SourceConfig",
    "RetryPolicy",
    "EventDecoder",
]
