"""동기화 컴포넌트 Protocol(인터페이스) 정의.

이 모듈은 인프라에 의존하지 않습니다.

Protocol은 구조적 서브타이핑(Structural Subtyping)을 지원합니다.
구현체가 이 Protocol을 상속하지 않아도, 시그니처만 맞으면 호환됩니다.
테스트에서는 가짜 구현체를 그대로 주입합니다.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from etch_broker.core.types import FetchResult, Post, SubmitResult, ThreadIndexResult
from etch_broker.schemas.events import SyncEvent


class ThreadSourceProtocol(Protocol):
    """스레드 목록/레코드 조회 인터페이스."""

    async def list_threads(self) -> list[str]: ...

    async def fetch_records(self, locator: str) -> FetchResult: ...


class EventSourceProtocol(Protocol):
    """변경 이벤트 스트림 인터페이스.

    Example:
        >>> async for event in source.stream_events():
        ...     ...  # 다음 이벤트는 처리가 끝난 뒤에 읽힘
    """

    def stream_events(self) -> AsyncIterator[SyncEvent]: ...


class PostSinkProtocol(Protocol):
    """게시글 배치 제출 인터페이스."""

    async def submit(self, posts: Sequence[Post]) -> SubmitResult: ...


class ThreadIndexerProtocol(Protocol):
    """스레드 단위 인덱싱 인터페이스 (full sync / delta 공용)."""

    async def index_thread(self, locator: str) -> ThreadIndexResult: ...
