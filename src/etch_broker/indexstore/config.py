"""Elasticsearch 설정 관리.

환경변수(.env 포함)로 설정을 관리합니다.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class ESConfig:
    """Elasticsearch 연결 및 인덱스 설정.

    Attributes:
        es_url: Elasticsearch 서버 URL (예: http://localhost:9200)
        es_username: HTTP Basic Auth 사용자명 (선택)
        es_password: HTTP Basic Auth 비밀번호 (선택)
        verify_certs: SSL 인증서 검증 여부
        request_timeout_s: 요청 타임아웃 (초)
        index_name: 게시글 인덱스명
        doc_type: bulk action의 _type. 기본은 생략. ES 7 이하 또는 REST 호환 모드에서만 지정
        refresh: bulk 후 refresh=wait_for 여부
    """

    # Connection
    es_url: str = field(default_factory=lambda: os.getenv("ES_URL", "http://localhost:9200"))
    es_username: str | None = field(default_factory=lambda: os.getenv("ES_USERNAME"))
    es_password: str | None = field(default_factory=lambda: os.getenv("ES_PASSWORD"))

    verify_certs: bool = field(default_factory=lambda: _env_flag("ES_VERIFY_CERTS", "true"))
    request_timeout_s: int = field(
        default_factory=lambda: int(os.getenv("ES_REQUEST_TIMEOUT_S", "30"))
    )

    # Index
    index_name: str = field(default_factory=lambda: os.getenv("ES_INDEX", "etch"))
    doc_type: str = field(default_factory=lambda: os.getenv("ES_DOC_TYPE", ""))
    refresh: bool = field(default_factory=lambda: _env_flag("ES_REFRESH", "false"))
