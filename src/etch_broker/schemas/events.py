"""etch 이벤트 스트림 메시지 스키마.

서버는 ``{"event": "cacheUpdate", "url": ..., "since": ...}`` 형태의 JSON을 보냅니다.
처리 대상이 아닌 메시지는 모두 ``UnknownEvent``로 감쌉니다.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, ValidationError

CACHE_UPDATE = "cacheUpdate"


class CacheUpdateEvent(BaseModel):
    """스레드 캐시 갱신 알림.

    since는 새로 추가된 첫 레코드의 순번이지만, 현재는 기록만 하고 사용하지 않습니다.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    event: Literal["cacheUpdate"] = CACHE_UPDATE
    url: str
    since: Any = None


class UnknownEvent(BaseModel):
    """해석할 수 없거나 처리 대상이 아닌 메시지."""

    model_config = ConfigDict(frozen=True)

    raw: Any


SyncEvent = Union[CacheUpdateEvent, UnknownEvent]


def decode_event(payload: Any) -> SyncEvent:
    """디코딩된 JSON 값을 SyncEvent로 변환.

    cacheUpdate가 아닌 event 값(cacheDelete 등), 객체가 아닌 값,
    url이 없는 메시지는 모두 UnknownEvent가 됩니다.
    """
    if isinstance(payload, dict) and payload.get("event") == CACHE_UPDATE:
        try:
            return CacheUpdateEvent.model_validate(payload)
        except ValidationError:
            pass
    return UnknownEvent(raw=payload)
