"""Elasticsearch 클라이언트 팩토리.

sync 흐름은 AsyncElasticsearch를, 마이그레이션 CLI는 동기 Elasticsearch를 씁니다.
두 클래스의 생성자 인자가 같으므로 팩토리 하나로 만듭니다.
"""

from __future__ import annotations

from typing import Any, TypeVar

from elasticsearch import AsyncElasticsearch

from .config import ESConfig

ClientT = TypeVar("ClientT")


def client_kwargs(cfg: ESConfig) -> dict[str, Any]:
    """ESConfig → 클라이언트 생성자 인자.

    Raises:
        ValueError: es_url이 비어 있는 경우.
    """
    if not cfg.es_url:
        raise ValueError("ES_URL 환경변수를 설정하세요.")

    kwargs: dict[str, Any] = {
        "hosts": [cfg.es_url],
        "verify_certs": cfg.verify_certs,
        "request_timeout": cfg.request_timeout_s,
    }
    # 사용자명/비밀번호가 둘 다 있을 때만 basic auth
    if cfg.es_username and cfg.es_password:
        kwargs["basic_auth"] = (cfg.es_username, cfg.es_password)
    return kwargs


def create_es_client(
    cfg: ESConfig | None = None,
    *,
    client_cls: type[ClientT] = AsyncElasticsearch,
) -> ClientT:
    """ES 클라이언트 생성.

    Args:
        cfg: ES 설정. None이면 환경변수에서 읽음.
        client_cls: AsyncElasticsearch(기본) 또는 Elasticsearch.

    Returns:
        client_cls 인스턴스. 비동기 클라이언트는 ``await es.close()``로 닫아야 합니다.
    """
    return client_cls(**client_kwargs(cfg or ESConfig()))


async def check_connection(es: AsyncElasticsearch) -> bool:
    """ping 성공 여부. 연결 오류도 False로 돌려줍니다."""
    try:
        return bool(await es.ping())
    except Exception:
        return False
