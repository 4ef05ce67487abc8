"""
In-memory fakes for the sync protocols.

They record every call so tests can assert on ordering and arguments.
"""

import asyncio
from typing import Dict, List, Optional, Sequence

from etch_broker.core.errors import (
    IndexSubmitError,
    SourceFetchError,
    SourceUnavailableError,
)
from etch_broker.core.types import FetchResult, Post, SubmitResult, ThreadIndexResult

ETCH_URL = "http://etch.test"
THREAD_A = "http://board.example/thread/42"
THREAD_B = "http://board.example/thread/43"


def dat_line(name="Alice", mail="sage", meta="2014/01/01 ID:abc", body="hi", title=""):
    return f"{name}<>{mail}<>{meta}<>{body}<>{title}".encode("cp932")


class FakeSource:
    """ThreadSourceProtocol fake."""

    def __init__(
        self,
        records: Optional[Dict[str, List[bytes]]] = None,
        threads: Optional[List[str]] = None,
        failing: Sequence[str] = (),
        unavailable: bool = False,
    ):
        self.records = records or {}
        self.threads = threads if threads is not None else list(self.records)
        self.failing = set(failing)
        self.unavailable = unavailable
        self.fetched: List[str] = []

    async def list_threads(self) -> List[str]:
        if self.unavailable:
            raise SourceUnavailableError("GET / -> HTTP 503")
        return list(self.threads)

    async def fetch_records(self, locator: str) -> FetchResult:
        self.fetched.append(locator)
        if locator in self.failing:
            return FetchResult.failure(locator, SourceFetchError(locator, 5, "HTTP 500"), 5)
        return FetchResult.success(locator, list(self.records.get(locator, [])), 1)


class FakeSink:
    """PostSinkProtocol fake. Fails for batches whose thread is in ``failing``."""

    def __init__(self, failing: Sequence[str] = ()):
        self.failing = set(failing)
        self.batches: List[List[Post]] = []

    async def submit(self, posts: Sequence[Post]) -> SubmitResult:
        self.batches.append(list(posts))
        if posts and posts[0].locator in self.failing:
            return SubmitResult(error=IndexSubmitError("bulk rejected"))
        return SubmitResult(submitted=len(posts))


class RecordingIndexer:
    """ThreadIndexerProtocol fake that logs start/end of each call into ``log``."""

    def __init__(self, log: Optional[list] = None, on_index=None):
        self.log = log if log is not None else []
        self.calls: List[str] = []
        self.on_index = on_index

    async def index_thread(self, locator: str) -> ThreadIndexResult:
        self.calls.append(locator)
        self.log.append(("start", locator))
        if self.on_index is not None:
            self.on_index(locator)
        await asyncio.sleep(0)
        self.log.append(("end", locator))
        return ThreadIndexResult(locator=locator, status="indexed")


class ListEventSource:
    """EventSourceProtocol fake yielding a fixed list of events."""

    def __init__(self, events, log: Optional[list] = None, hang: bool = False):
        self.events = list(events)
        self.log = log if log is not None else []
        self.hang = hang
        self.closed = False

    async def stream_events(self):
        try:
            for i, event in enumerate(self.events):
                self.log.append(("read", i))
                yield event
            if self.hang:
                await asyncio.Event().wait()
        finally:
            self.closed = True
