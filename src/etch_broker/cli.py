"""etch → Elasticsearch 동기화 CLI.

Usage:
    etch-broker                      # full sync + delta (둘 다)
    etch-broker --full               # 전체 재색인만
    etch-broker --delta --etch http://localhost:25252 --es http://localhost:9200
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import replace

from etch_broker.core.errors import SourceUnavailableError
from etch_broker.indexstore import ESConfig, IndexSink, check_connection, create_es_client
from etch_broker.source import SourceClient, SourceConfig
from etch_broker.sync import EventStreamDispatcher, SyncEngine

logger = logging.getLogger("etch_broker")


def _install_signal_handlers(stop: asyncio.Event) -> list[signal.Signals]:
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows 등 add_signal_handler 미지원 환경
            continue
        installed.append(sig)
    return installed


async def _full_sync(engine: SyncEngine, stop: asyncio.Event) -> int:
    try:
        await engine.run_full_sync(stop)
    except SourceUnavailableError as e:
        logger.error(f"full sync aborted: {e}")
        return 1
    return 0


async def _delta_sync(dispatcher: EventStreamDispatcher, stop: asyncio.Event) -> int:
    await dispatcher.run(stop)
    return 0


async def run(
    source_cfg: SourceConfig,
    es_cfg: ESConfig,
    *,
    full: bool = True,
    delta: bool = True,
    stop: asyncio.Event | None = None,
) -> int:
    """선택한 흐름을 실행하고 종료 코드를 반환.

    full sync와 delta는 서로 독립적인 task로 동시에 실행되며,
    한쪽의 실패가 다른 쪽을 취소하지 않습니다.
    """
    stop = stop or asyncio.Event()
    signals = _install_signal_handlers(stop)

    es = create_es_client(es_cfg)
    try:
        if not await check_connection(es):
            logger.warning(f"Elasticsearch 연결 실패: {es_cfg.es_url}")

        async with SourceClient(source_cfg) as source:
            engine = SyncEngine(source, IndexSink(es, es_cfg), encoding=source_cfg.encoding)

            flows = []
            if full:
                flows.append(_full_sync(engine, stop))
            if delta:
                flows.append(_delta_sync(EventStreamDispatcher(source, engine), stop))

            results = await asyncio.gather(*flows, return_exceptions=True)
    finally:
        await es.close()
        loop = asyncio.get_running_loop()
        for sig in signals:
            loop.remove_signal_handler(sig)

    code = 0
    for result in results:
        if isinstance(result, BaseException):
            logger.error("flow crashed", exc_info=result)
            code = 1
        elif result:
            code = result
    return code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="etch 캐시를 Elasticsearch에 동기화",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
--full / --delta 둘 다 지정하지 않으면 둘 다 실행합니다.

환경변수:
  ETCH_URL                  etch origin (기본: http://localhost:25252)
  ETCH_ENCODING             레코드 인코딩 (기본: cp932)
  ETCH_FETCH_MAX_ATTEMPTS   /cache 최대 시도 횟수 (기본: 5)
  ETCH_FETCH_RETRY_DELAY_S  /cache 재시도 간격 (기본: 0.5)
  ES_URL                    Elasticsearch origin (기본: http://localhost:9200)
  ES_INDEX                  인덱스명 (기본: etch)
  ES_DOC_TYPE               문서 타입 _type (기본: 생략, ES 7 이하에서만 지정)
""",
    )
    parser.add_argument("--etch", metavar="URL", help="etch origin (ETCH_URL보다 우선)")
    parser.add_argument("--es", metavar="URL", help="Elasticsearch origin (ES_URL보다 우선)")
    parser.add_argument("--full", action="store_true", help="전체 스레드 재색인")
    parser.add_argument("--delta", action="store_true", help="이벤트 스트림 기반 증분 색인")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="로그 레벨 (기본: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI 진입점."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    source_cfg = SourceConfig()
    if args.etch:
        source_cfg = replace(source_cfg, etch_url=args.etch)
    es_cfg = ESConfig()
    if args.es:
        es_cfg = replace(es_cfg, es_url=args.es)

    full, delta = args.full, args.delta
    if not full and not delta:
        full = delta = True

    return asyncio.run(run(source_cfg, es_cfg, full=full, delta=delta))


if __name__ == "__main__":
    sys.exit(main())
