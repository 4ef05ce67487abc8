"""스레드 인덱싱 엔진.

full sync와 delta(이벤트 스트림) 모두 ``index_thread``를 공유합니다.

    fetch_records → parse_record (레코드별) → submit (스레드당 bulk 1회)
"""

from __future__ import annotations

import asyncio
import logging

from etch_broker.core.errors import InvalidLocatorError, RecordParseError
from etch_broker.core.protocols import PostSinkProtocol, ThreadSourceProtocol
from etch_broker.core.types import Post, SyncSummary, ThreadIndexResult
from etch_broker.records.identity import thread_key
from etch_broker.records.parser import DEFAULT_ENCODING, parse_record


class SyncEngine:
    """스레드 단위 동기화 엔진.

    인스턴스 상태를 변경하지 않으므로 서로 다른 스레드에 대해
    동시에 호출해도 안전합니다.
    """

    def __init__(
        self,
        source: ThreadSourceProtocol,
        sink: PostSinkProtocol,
        *,
        encoding: str = DEFAULT_ENCODING,
        logger: logging.Logger | None = None,
    ):
        self.source = source
        self.sink = sink
        self.encoding = encoding
        self.logger = logger or logging.getLogger(__name__)

    def parse_lines(self, locator: str, lines: list[bytes]) -> tuple[list[Post], int]:
        """모든 레코드를 파싱. (게시글 목록, 실패 건수) 반환."""
        posts: list[Post] = []
        errors = 0
        for i, line in enumerate(lines):
            parsed = parse_record(locator, i + 1, line, encoding=self.encoding)
            if isinstance(parsed, RecordParseError):
                self.logger.error(str(parsed))
                errors += 1
                continue
            posts.append(parsed)
        return posts, errors

    async def _index_thread(self, locator: str) -> ThreadIndexResult:
        try:
            thread_key(locator)
        except InvalidLocatorError as e:
            self.logger.error(f"skipping thread: {e}")
            return ThreadIndexResult(locator=locator, status="skipped")

        fetched = await self.source.fetch_records(locator)
        if not fetched.ok:
            self.logger.error(f"skipping thread: {fetched.error}")
            return ThreadIndexResult(locator=locator, status="skipped")

        posts, parse_errors = self.parse_lines(locator, fetched.lines)

        submitted = await self.sink.submit(posts)
        if not submitted.ok:
            self.logger.error(f"{locator}: {submitted.error}")
            return ThreadIndexResult(
                locator=locator,
                status="failed",
                posts=len(posts),
                parse_errors=parse_errors,
            )

        return ThreadIndexResult(
            locator=locator,
            status="indexed",
            posts=len(posts),
            parse_errors=parse_errors,
            indexed=submitted.submitted,
        )

    async def index_thread(self, locator: str) -> ThreadIndexResult:
        """스레드 하나를 조회/파싱/색인.

        한 스레드의 실패가 호출자에게 전파되지 않도록 결과 값으로 돌려줍니다.
        """
        self.logger.info(f"indexing {locator}...")
        try:
            return await self._index_thread(locator)
        except Exception:
            self.logger.exception(f"{locator}: unexpected error while indexing")
            return ThreadIndexResult(locator=locator, status="failed")

    async def run_full_sync(self, stop: asyncio.Event | None = None) -> SyncSummary:
        """모든 스레드를 순서대로 재색인.

        Raises:
            SourceUnavailableError: 스레드 목록을 가져올 수 없는 경우.
        """
        locators = await self.source.list_threads()
        self.logger.info(f"full sync: {len(locators)} thread(s)")

        summary = SyncSummary()
        for locator in locators:
            if stop is not None and stop.is_set():
                self.logger.info("full sync interrupted")
                break
            summary.add(await self.index_thread(locator))

        self.logger.info(
            f"full sync done: {summary.indexed} indexed, {summary.skipped} skipped, "
            f"{summary.failed} failed ({summary.posts} posts, {summary.parse_errors} parse errors)"
        )
        return summary
