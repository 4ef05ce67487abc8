"""동기화 과정에서 사용하는 예외 정의.

레코드/스레드 단위 실패는 대부분 값(Result)으로 반환되고,
흐름 자체를 끝내야 하는 경우에만 raise 됩니다.
"""

from __future__ import annotations

from typing import Any


class EtchBrokerError(Exception):
    """etch-broker 예외 기본 클래스."""


class InvalidLocatorError(EtchBrokerError):
    """스레드 URL을 파싱할 수 없음."""

    def __init__(self, locator: str, reason: str):
        self.locator = locator
        self.reason = reason
        super().__init__(f"invalid thread locator {locator!r}: {reason}")


class RecordParseError(EtchBrokerError):
    """한 줄짜리 레코드가 형식에 맞지 않음. 해당 레코드만 버려집니다."""

    def __init__(self, locator: str, n: int, cause: str):
        self.locator = locator
        self.n = n
        self.cause = cause
        super().__init__(f"{locator} at {n}: {cause}")


class SourceFetchError(EtchBrokerError):
    """스레드 레코드 조회 실패 (재시도 소진)."""

    def __init__(self, locator: str, attempts: int, last_error: str):
        self.locator = locator
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{locator}: gave up after {attempts} attempt(s): {last_error}")


class SourceUnavailableError(EtchBrokerError):
    """소스 서버에서 스레드 목록/이벤트 스트림을 가져올 수 없음."""


class IndexSubmitError(EtchBrokerError):
    """bulk 요청 실패. 해당 배치 전체가 버려집니다."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.errors = errors or []
        super().__init__(message)


class UnknownEventKind(EtchBrokerError):
    """처리 대상이 아닌 이벤트."""

    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__(f"unknown event: {raw!r}")
