"""Elasticsearch 인덱스 마이그레이션 모듈.

인프라 설정을 위한 독립적인 모듈입니다.

Usage:
    python -m etch_broker.migrations.migrate create
    python -m etch_broker.migrations.migrate status
    python -m etch_broker.migrations.migrate drop --confirm
"""

from .mappings import posts_index_mapping
from .migrate import IndexInfo, Migrator

__all__ = [
    # Mappings
    "posts_index_mapping",
    # Migration
    "Migrator",
    "IndexInfo",
]
