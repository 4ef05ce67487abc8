"""etch 소스 서버 설정 관리.

환경변수(.env 포함)로 설정을 관리합니다.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class RetryPolicy:
    """고정 간격 재시도 정책.

    Attributes:
        max_attempts: 최대 시도 횟수 (첫 시도 포함)
        delay_s: 시도 사이 대기 시간 (초). 마지막 실패 후에는 대기하지 않음
    """

    max_attempts: int = 5
    delay_s: float = 0.5

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts는 1 이상이어야 합니다.")
        if self.delay_s < 0:
            raise ValueError("delay_s는 0 이상이어야 합니다.")


@dataclass(frozen=True)
class SourceConfig:
    """etch 서버 연결 설정.

    Attributes:
        etch_url: etch 서버 origin (예: http://localhost:25252)
        encoding: 레코드 피드 인코딩 (2ch dat는 cp932)
        fetch_max_attempts: /cache 조회 최대 시도 횟수
        fetch_retry_delay_s: /cache 재시도 간격 (초)
        request_timeout_s: 일반 요청 타임아웃 (초). 이벤트 스트림에는 적용하지 않음
    """

    etch_url: str = field(
        default_factory=lambda: os.getenv("ETCH_URL", "http://localhost:25252")
    )
    encoding: str = field(default_factory=lambda: os.getenv("ETCH_ENCODING", "cp932"))

    fetch_max_attempts: int = field(
        default_factory=lambda: int(os.getenv("ETCH_FETCH_MAX_ATTEMPTS", "5"))
    )
    fetch_retry_delay_s: float = field(
        default_factory=lambda: float(os.getenv("ETCH_FETCH_RETRY_DELAY_S", "0.5"))
    )
    request_timeout_s: float = field(
        default_factory=lambda: float(os.getenv("ETCH_REQUEST_TIMEOUT_S", "30"))
    )

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.fetch_max_attempts,
            delay_s=self.fetch_retry_delay_s,
        )

    def url(self, path: str) -> str:
        """origin + path 전체 URL 반환."""
        return f"{self.etch_url.rstrip('/')}{path}"
