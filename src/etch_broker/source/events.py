"""이벤트 스트림 증분 디코더.

/events 응답은 끝나지 않는 chunked 본문이며, chunk 하나에 JSON 객체 하나가 담깁니다.
네트워크 경계와 chunk 경계가 항상 일치하지는 않으므로 다음 중 하나를 만나면
버퍼를 하나의 단위로 보고 디코딩합니다.

    - 줄바꿈 (``\\n``)
    - HTTP chunk 끝
    - 버퍼 전체가 이미 완전한 JSON으로 파싱되는 경우
"""

from __future__ import annotations

import json
from typing import Any

from etch_broker.schemas.events import SyncEvent, UnknownEvent, decode_event

MAX_BUFFER_BYTES = 1024 * 1024

_decoder = json.JSONDecoder()


def _decode_values(text: str) -> tuple[list[Any], str]:
    """연속된 JSON 값을 앞에서부터 디코딩. (값 목록, 디코딩하지 못한 나머지) 반환."""
    values: list[Any] = []
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            return values, ""
        try:
            value, pos = _decoder.raw_decode(text, pos)
        except json.JSONDecodeError:
            return values, text[pos:]
        values.append(value)


def _complete_values(data: bytes) -> list[Any] | None:
    """버퍼 전체가 완전한 JSON 값들이면 그 목록, 아니면 None."""
    try:
        values, rest = _decode_values(data.decode("utf-8"))
    except UnicodeDecodeError:
        return None
    return None if rest else values


class EventDecoder:
    """바이트 조각을 받아 SyncEvent 목록으로 변환하는 상태 있는 디코더."""

    def __init__(self, max_buffer_bytes: int = MAX_BUFFER_BYTES):
        self.max_buffer_bytes = max_buffer_bytes
        self._buffer = b""

    def _decode_unit(self, unit: bytes) -> list[SyncEvent]:
        text = unit.decode("utf-8", errors="replace")
        if not text.strip():
            return []
        values, rest = _decode_values(text)
        events = [decode_event(v) for v in values]
        if rest:
            events.append(UnknownEvent(raw=rest.strip()))
        return events

    def feed(self, data: bytes, end_of_chunk: bool = False) -> list[SyncEvent]:
        """수신한 바이트를 버퍼에 추가하고 완성된 이벤트를 반환."""
        self._buffer += data
        *units, rest = self._buffer.split(b"\n")

        events: list[SyncEvent] = []
        for unit in units:
            events.extend(self._decode_unit(unit))

        if end_of_chunk:
            events.extend(self._decode_unit(rest))
            rest = b""
        elif rest.strip():
            # 줄바꿈 없이 객체만 보내는 서버 대응
            values = _complete_values(rest)
            if values is not None:
                events.extend(decode_event(v) for v in values)
                rest = b""
            elif len(rest) > self.max_buffer_bytes:
                events.append(UnknownEvent(raw=f"<discarded {len(rest)} bytes>"))
                rest = b""

        self._buffer = rest
        return events

    def flush(self) -> list[SyncEvent]:
        """스트림 종료 시 남은 버퍼를 디코딩."""
        rest, self._buffer = self._buffer, b""
        return self._decode_unit(rest)
