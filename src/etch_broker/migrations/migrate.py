"""Elasticsearch 게시글 인덱스 마이그레이션 관리.

Usage:
    etch-broker-migrate status
    etch-broker-migrate create
    etch-broker-migrate drop --confirm
    etch-broker-migrate recreate --confirm

환경변수:
    ES_URL: Elasticsearch URL (기본: http://localhost:9200)
    ES_USERNAME: Basic Auth 사용자명 (선택)
    ES_PASSWORD: Basic Auth 비밀번호 (선택)
    ES_INDEX: 게시글 인덱스명 (기본: etch)
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass

from elasticsearch import Elasticsearch

from etch_broker.indexstore.client import create_es_client
from etch_broker.indexstore.config import ESConfig

from .mappings import posts_index_mapping


# =============================================================================
# Migrator
# =============================================================================


@dataclass
class IndexInfo:
    """인덱스 정보."""

    name: str
    exists: bool
    doc_count: int = 0
    size_bytes: int = 0


class Migrator:
    """게시글 인덱스 마이그레이션 관리자."""

    def __init__(self, es: Elasticsearch, cfg: ESConfig):
        self.es = es
        self.cfg = cfg

    @property
    def index_name(self) -> str:
        return self.cfg.index_name

    def status(self) -> IndexInfo:
        """인덱스 정보 조회."""
        if not self.es.indices.exists(index=self.index_name):
            return IndexInfo(name=self.index_name, exists=False)

        stats = self.es.indices.stats(index=self.index_name)
        index_stats = stats["indices"].get(self.index_name, {}).get("primaries", {})

        return IndexInfo(
            name=self.index_name,
            exists=True,
            doc_count=index_stats.get("docs", {}).get("count", 0),
            size_bytes=index_stats.get("store", {}).get("size_in_bytes", 0),
        )

    def create(self, *, skip_existing: bool = True) -> bool:
        """인덱스 생성. 새로 만들었으면 True."""
        if self.es.indices.exists(index=self.index_name):
            if skip_existing:
                return False
            raise ValueError(f"인덱스 '{self.index_name}'이 이미 존재합니다.")

        mapping = posts_index_mapping()
        self.es.indices.create(
            index=self.index_name,
            settings=mapping["settings"],
            mappings=mapping["mappings"],
        )
        return True

    def drop(self) -> bool:
        """인덱스 삭제. 삭제했으면 True."""
        if not self.es.indices.exists(index=self.index_name):
            return False
        self.es.indices.delete(index=self.index_name)
        return True

    def recreate(self) -> bool:
        """인덱스 재생성 (drop + create)."""
        self.drop()
        return self.create(skip_existing=False)


# =============================================================================
# CLI
# =============================================================================


def _format_bytes(size_bytes: int | float) -> str:
    """바이트를 읽기 쉬운 형식으로 변환."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def cmd_status(migrator: Migrator) -> int:
    """인덱스 상태 출력."""
    info = migrator.status()
    mark = "✅" if info.exists else "❌"
    print(f"\n{mark} {info.name}")
    if info.exists:
        print(f"   Documents: {info.doc_count:,}")
        print(f"   Size: {_format_bytes(info.size_bytes)}")
    print()
    return 0


def cmd_create(migrator: Migrator) -> int:
    """인덱스 생성."""
    created = migrator.create(skip_existing=True)
    if created:
        print(f"\n✅ created {migrator.index_name}")
    else:
        print(f"\n✅ {migrator.index_name} already exists")
    return 0


def cmd_drop(migrator: Migrator, confirm: bool) -> int:
    """인덱스 삭제."""
    if not confirm:
        print("\n⚠️  --confirm 플래그를 추가해야 삭제됩니다.")
        print("   이 작업은 모든 데이터를 삭제합니다!")
        return 1

    dropped = migrator.drop()
    print(f"\n🗑️  {migrator.index_name}: {'dropped' if dropped else 'not found'}")
    return 0


def cmd_recreate(migrator: Migrator, confirm: bool) -> int:
    """인덱스 재생성."""
    if not confirm:
        print("\n⚠️  --confirm 플래그를 추가해야 재생성됩니다.")
        print("   이 작업은 모든 데이터를 삭제합니다!")
        return 1

    migrator.recreate()
    print(f"\n♻️  recreated {migrator.index_name}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI 진입점."""
    parser = argparse.ArgumentParser(
        description="etch 게시글 인덱스 마이그레이션 도구",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
환경변수:
  ES_URL             Elasticsearch URL (기본: http://localhost:9200)
  ES_USERNAME        Basic Auth 사용자명
  ES_PASSWORD        Basic Auth 비밀번호
  ES_INDEX           게시글 인덱스명 (기본: etch)
""",
    )
    parser.add_argument("--es", help="Elasticsearch origin (ES_URL보다 우선)")
    subparsers = parser.add_subparsers(dest="command", help="명령어")

    subparsers.add_parser("status", help="인덱스 상태 확인")
    subparsers.add_parser("create", help="인덱스 생성")

    drop_parser = subparsers.add_parser("drop", help="인덱스 삭제")
    drop_parser.add_argument("--confirm", action="store_true", help="삭제 확인 (필수)")

    recreate_parser = subparsers.add_parser("recreate", help="인덱스 재생성")
    recreate_parser.add_argument("--confirm", action="store_true", help="재생성 확인 (필수)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cfg = ESConfig(es_url=args.es) if args.es else ESConfig()
    try:
        es = create_es_client(cfg, client_cls=Elasticsearch)
        if not es.ping():
            print(f"\n❌ Elasticsearch 연결 실패: {cfg.es_url}")
            return 1
        print(f"\n🔗 Connected to: {cfg.es_url}")
    except Exception as e:
        print(f"\n❌ Elasticsearch 연결 오류: {e}")
        return 1

    migrator = Migrator(es, cfg)

    if args.command == "status":
        return cmd_status(migrator)
    elif args.command == "create":
        return cmd_create(migrator)
    elif args.command == "drop":
        return cmd_drop(migrator, args.confirm)
    elif args.command == "recreate":
        return cmd_recreate(migrator, args.confirm)

    return 1


if __name__ == "__main__":
    sys.exit(main())
