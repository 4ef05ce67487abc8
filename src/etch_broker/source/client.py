"""etch 캐시 서버 HTTP 클라이언트.

엔드포인트:
    GET /                  스레드 URL 목록 (한 줄에 하나)
    GET /cache?url=<url>   스레드 레코드 피드 (dat 형식)
    GET /events            변경 이벤트 스트림 (chunked JSON)

Usage:
    >>> async with SourceClient(SourceConfig()) as source:
    ...     urls = await source.list_threads()
    ...     result = await source.fetch_records(urls[0])
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

import aiohttp

from etch_broker.core.errors import SourceFetchError, SourceUnavailableError
from etch_broker.core.types import FetchResult
from etch_broker.records.parser import split_records
from etch_broker.schemas.events import SyncEvent
from etch_broker.source.config import SourceConfig
from etch_broker.source.events import EventDecoder


class SourceClient:
    """etch 서버 클라이언트.

    ThreadSourceProtocol, EventSourceProtocol을 구현합니다.
    session을 넘기지 않으면 내부에서 생성하고 close() 시 함께 닫습니다.
    """

    def __init__(
        self,
        cfg: SourceConfig,
        session: aiohttp.ClientSession | None = None,
        *,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.retry = cfg.retry_policy
        self.logger = logger or logging.getLogger(__name__)
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.cfg.request_timeout_s)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> SourceClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # =========================================================================
    # Thread enumeration
    # =========================================================================

    async def list_threads(self) -> list[str]:
        """캐시된 모든 스레드 URL 조회.

        Raises:
            SourceUnavailableError: 전송 오류 또는 2xx가 아닌 응답.
        """
        self.logger.info("fetching all thread urls...")
        url = self.cfg.url("/")
        try:
            async with self.session.get(url) as resp:
                if resp.status // 100 != 2:
                    raise SourceUnavailableError(f"GET {url} -> HTTP {resp.status}")
                body = await resp.text(encoding="utf-8", errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SourceUnavailableError(f"GET {url} failed: {e!r}") from e

        return [line.strip() for line in body.splitlines() if line.strip()]

    # =========================================================================
    # Per-thread records
    # =========================================================================

    async def _fetch_once(self, locator: str) -> tuple[bytes | None, str]:
        """한 번 조회. (본문, 실패 사유) 반환."""
        try:
            async with self.session.get(self.cfg.url("/cache"), params={"url": locator}) as resp:
                if resp.status // 100 != 2:
                    return None, f"HTTP {resp.status}"
                return await resp.read(), ""
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            return None, repr(e)

    async def fetch_records(self, locator: str) -> FetchResult:
        """스레드 레코드 피드 조회 (고정 간격 재시도).

        실패 응답/전송 오류는 retry_policy.max_attempts까지 재시도하며,
        소진 시 예외 대신 실패 FetchResult를 반환합니다.
        """
        last_error = ""
        for attempt in range(1, self.retry.max_attempts + 1):
            body, last_error = await self._fetch_once(locator)
            if body is not None:
                return FetchResult.success(locator, split_records(body), attempt)

            self.logger.warning(
                f"{locator}: fetch attempt {attempt}/{self.retry.max_attempts} failed ({last_error})"
            )
            if attempt < self.retry.max_attempts:
                await asyncio.sleep(self.retry.delay_s)

        error = SourceFetchError(locator, self.retry.max_attempts, last_error)
        return FetchResult.failure(locator, error, self.retry.max_attempts)

    # =========================================================================
    # Event stream
    # =========================================================================

    async def stream_events(self) -> AsyncIterator[SyncEvent]:
        """/events 스트림에서 이벤트를 하나씩 yield.

        소비자가 다음 이벤트를 요청할 때까지 다음 chunk를 읽지 않습니다.

        Raises:
            SourceUnavailableError: 스트림을 열 수 없거나 도중에 연결 오류가 난 경우.
        """
        url = self.cfg.url("/events")
        decoder = EventDecoder()
        try:
            async with self.session.get(url, timeout=aiohttp.ClientTimeout(total=None)) as resp:
                if resp.status // 100 != 2:
                    raise SourceUnavailableError(f"GET {url} -> HTTP {resp.status}")
                self.logger.info(f"listening {url}...")

                async for data, end_of_chunk in resp.content.iter_chunks():
                    for event in decoder.feed(data, end_of_chunk):
                        yield event
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SourceUnavailableError(f"GET {url} failed: {e!r}") from e

        for event in decoder.flush():
            yield event
