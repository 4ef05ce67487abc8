"""Elasticsearch 기반 게시글 색인 (Sink Layer).

주요 컴포넌트:
    - ESConfig: 연결/인덱스 설정
    - create_es_client: AsyncElasticsearch (또는 동기 Elasticsearch) 생성
    - IndexSink: 스레드 단위 bulk upsert

Usage:
    >>> cfg = ESConfig()
    >>> es = create_es_client(cfg)
    >>> sink = IndexSink(es, cfg)
    >>> result = await sink.submit(posts)
"""

from .client import check_connection, create_es_client
from .config import ESConfig
from .documents import PostDoc
from .sink import IndexSink

__all__ = [
    # Config
    "ESConfig",
    # Client
    "create_es_client",
    "check_connection",
    # Documents
    "PostDoc",
    # Sink
    "IndexSink",
]
