"""이벤트 스트림 디스패처 (delta sync).

이벤트는 도착 순서대로 하나씩 처리합니다. 현재 이벤트의 인덱싱이 끝나기 전에는
다음 이벤트를 읽지 않으므로 업데이트가 몰려도 bulk 요청이 동시에 쌓이지 않습니다.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from etch_broker.core.errors import SourceUnavailableError, UnknownEventKind
from etch_broker.core.protocols import EventSourceProtocol, ThreadIndexerProtocol
from etch_broker.core.types import DispatchStats
from etch_broker.schemas.events import CacheUpdateEvent, SyncEvent

_STOPPED = object()


class EventStreamDispatcher:
    """/events 스트림을 소비하며 변경된 스레드를 재색인."""

    def __init__(
        self,
        source: EventSourceProtocol,
        indexer: ThreadIndexerProtocol,
        *,
        logger: logging.Logger | None = None,
    ):
        self.source = source
        self.indexer = indexer
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(self, event: SyncEvent, stats: DispatchStats) -> None:
        """이벤트 하나 처리. 인덱싱이 끝날 때까지 반환하지 않음."""
        stats.events += 1
        if isinstance(event, CacheUpdateEvent):
            self.logger.debug(f"cacheUpdate {event.url} (since={event.since!r})")
            await self.indexer.index_thread(event.url)
            stats.dispatched += 1
            return

        self.logger.warning(f"ignored: {UnknownEventKind(event.raw)}")
        stats.ignored += 1

    async def _next(self, events: AsyncIterator[SyncEvent], stop: asyncio.Event) -> object:
        """다음 이벤트 또는 _STOPPED. 대기 중 stop이 걸리면 읽기를 취소한다."""
        next_task = asyncio.ensure_future(events.__anext__())
        stop_task = asyncio.ensure_future(stop.wait())
        try:
            await asyncio.wait({next_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (next_task, stop_task):
                if not task.done():
                    task.cancel()
            await asyncio.gather(next_task, stop_task, return_exceptions=True)

        if next_task.cancelled():
            return _STOPPED
        try:
            return next_task.result()
        except StopAsyncIteration:
            return _STOPPED

    async def run(self, stop: asyncio.Event | None = None) -> DispatchStats:
        """스트림이 끝나거나 stop이 설정될 때까지 이벤트 처리.

        스트림을 열 수 없거나 연결이 끊기면 로그를 남기고 종료합니다 (재연결 없음).
        """
        stop = stop or asyncio.Event()
        stats = DispatchStats()
        events = self.source.stream_events()
        try:
            while not stop.is_set():
                event = await self._next(events, stop)
                if event is _STOPPED:
                    break
                await self.dispatch(event, stats)
        except SourceUnavailableError as e:
            self.logger.error(f"event stream unavailable: {e}")
        finally:
            await events.aclose()

        self.logger.info(
            f"event stream closed: {stats.events} event(s), "
            f"{stats.dispatched} dispatched, {stats.ignored} ignored"
        )
        return stats
