"""스레드 URL + 순번으로 인덱스 문서 ID를 만든다.

같은 입력에는 항상 같은 ID가 나오므로 재인덱싱은 덮어쓰기(upsert)가 됩니다.

Example:
    >>> document_id("http://board.example/thread/42", 1)
    'board.example-thread-42:1'
"""

from __future__ import annotations

from urllib.parse import urlsplit

from etch_broker.core.errors import InvalidLocatorError

SEGMENT_SEPARATOR = "-"


def _path_segments(path: str) -> list[str]:
    segments = path.split("/")
    # 끝의 빈 세그먼트(trailing slash)는 무시
    while segments and segments[-1] == "":
        segments.pop()
    return segments[1:]


def thread_key(locator: str) -> str:
    """스레드 URL을 host-path 형태의 키로 변환.

    Raises:
        InvalidLocatorError: URL로 파싱할 수 없거나 scheme/host가 없는 경우.
    """
    try:
        parts = urlsplit(locator.strip())
        host = parts.hostname
    except ValueError as e:
        raise InvalidLocatorError(locator, str(e)) from e

    if not parts.scheme:
        raise InvalidLocatorError(locator, "missing scheme")
    if not host:
        raise InvalidLocatorError(locator, "missing host")

    return SEGMENT_SEPARATOR.join([host, *_path_segments(parts.path)])


def document_id(locator: str, n: int) -> str:
    """문서 ID ``{thread_key}:{n}``."""
    return f"{thread_key(locator)}:{n}"
