"""etch 캐시 레코드(dat 한 줄) 파서.

한 줄은 ``name<>mail<>meta<>body<>title`` 형식입니다.
형식이 맞지 않는 줄은 예외 대신 RecordParseError 값으로 돌려주며,
같은 스레드의 다른 레코드 처리에는 영향을 주지 않습니다.
"""

from __future__ import annotations

from etch_broker.core.errors import RecordParseError
from etch_broker.core.types import Post

FIELD_DELIMITER = "<>"
FIELD_COUNT = 5
DEFAULT_ENCODING = "cp932"


def _chomp(text: str) -> str:
    """끝의 줄바꿈 하나만 제거."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith(("\n", "\r")):
        return text[:-1]
    return text


def split_records(body: bytes) -> list[bytes]:
    """레코드 피드 본문을 줄 단위로 분리.

    빈 줄도 남겨 두어야 이후 레코드의 순번이 피드와 일치합니다.
    마지막 줄바꿈 뒤의 빈 꼬리만 제거합니다.
    """
    lines = body.split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()
    return lines


def parse_record(
    locator: str,
    n: int,
    raw: bytes,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> Post | RecordParseError:
    """레코드 한 줄을 Post로 변환.

    Args:
        locator: 스레드 URL
        n: 1부터 시작하는 순번
        raw: 원본 바이트 (줄바꿈 포함 가능)
        encoding: 원본 인코딩. 디코딩 불가 바이트는 U+FFFD로 치환됩니다.

    Returns:
        성공 시 Post, 실패 시 RecordParseError.
    """
    try:
        text = raw.decode(encoding, errors="replace")
    except LookupError as e:
        return RecordParseError(locator, n, f"unknown encoding: {e}")

    fields = _chomp(text).split(FIELD_DELIMITER)
    if len(fields) != FIELD_COUNT:
        return RecordParseError(
            locator, n, f"expected {FIELD_COUNT} fields, got {len(fields)}"
        )

    name, mail, meta, body, title = fields
    return Post(
        locator=locator,
        n=n,
        name=name,
        mail=mail,
        meta=meta,
        body=body,
        title=title,
    )
