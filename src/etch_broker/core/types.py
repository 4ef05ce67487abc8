"""동기화 공용 타입 정의.

이 모듈은 인프라에 의존하지 않습니다.
source, indexstore, sync 등 어디서든 import할 수 있습니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from etch_broker.core.errors import IndexSubmitError, SourceFetchError


@dataclass(frozen=True)
class Post:
    """파싱된 게시글 한 건.

    Attributes:
        locator: 게시글이 속한 스레드 URL
        n: 스레드 내 1부터 시작하는 순번
        name: 작성자 이름
        mail: 메일 필드 (sage 등)
        meta: 날짜/ID 등 메타 정보
        body: 본문 (HTML 포함)
        title: 스레드 제목 (보통 첫 레코드에만 존재)
    """

    locator: str
    n: int
    name: str
    mail: str
    meta: str
    body: str
    title: str


@dataclass(frozen=True)
class FetchResult:
    """스레드 레코드 조회 결과.

    실패 시에도 None 대신 이 객체가 반환되므로,
    호출자는 ``ok``를 확인하고 분기해야 합니다.
    """

    locator: str
    lines: list[bytes] = field(default_factory=list)
    attempts: int = 0
    error: SourceFetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, locator: str, lines: list[bytes], attempts: int) -> FetchResult:
        return cls(locator=locator, lines=lines, attempts=attempts)

    @classmethod
    def failure(cls, locator: str, error: SourceFetchError, attempts: int) -> FetchResult:
        return cls(locator=locator, attempts=attempts, error=error)


@dataclass(frozen=True)
class SubmitResult:
    """bulk 제출 결과."""

    submitted: int = 0
    error: IndexSubmitError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


ThreadStatus = Literal["indexed", "skipped", "failed"]


@dataclass(frozen=True)
class ThreadIndexResult:
    """스레드 하나를 인덱싱한 결과.

    Attributes:
        locator: 스레드 URL
        status: indexed(제출 성공) / skipped(조회 실패 등으로 제출 안 함) / failed(제출 실패)
        posts: 파싱에 성공한 게시글 수
        parse_errors: 버려진 레코드 수
        indexed: 인덱스에 반영된 문서 수
    """

    locator: str
    status: ThreadStatus
    posts: int = 0
    parse_errors: int = 0
    indexed: int = 0


@dataclass
class SyncSummary:
    """전체 동기화 집계."""

    threads: int = 0
    indexed: int = 0
    skipped: int = 0
    failed: int = 0
    posts: int = 0
    parse_errors: int = 0

    def add(self, result: ThreadIndexResult) -> None:
        self.threads += 1
        if result.status == "indexed":
            self.indexed += 1
        elif result.status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.posts += result.posts
        self.parse_errors += result.parse_errors


@dataclass
class DispatchStats:
    """이벤트 스트림 처리 집계."""

    events: int = 0
    dispatched: int = 0
    ignored: int = 0
