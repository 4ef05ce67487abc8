"""Elasticsearch 인덱스 매핑 정의.

sync 코드와 독립적으로 ES 인덱스 스키마만 정의합니다.
인프라 설정 목적이므로 비즈니스 로직 의존성이 없습니다.
"""

from __future__ import annotations

from typing import Any


def _cjk_settings() -> dict[str, Any]:
    """일본어 본문용 CJK bigram 분석기 설정.

    Note:
        내장 필터만 사용하므로 플러그인이 필요 없습니다.
        body_html은 html_strip으로 태그를 제거한 뒤 분석합니다.
    """
    filters = ["cjk_width", "lowercase", "cjk_bigram"]
    return {
        "analysis": {
            "analyzer": {
                "ja_cjk": {
                    "type": "custom",
                    "tokenizer": "standard",
                    "filter": filters,
                },
                "ja_cjk_html": {
                    "type": "custom",
                    "char_filter": ["html_strip"],
                    "tokenizer": "standard",
                    "filter": filters,
                },
            }
        }
    }


def posts_index_mapping() -> dict[str, Any]:
    """게시글 인덱스 매핑.

    Fields:
        - name: 작성자 이름 (text + keyword)
        - mail: 메일 필드 (keyword)
        - meta: 날짜/ID 등 (text)
        - body_html: 본문 HTML (text, 태그 제거 후 분석)
        - title: 스레드 제목 (text + keyword)
    """
    return {
        "settings": _cjk_settings(),
        "mappings": {
            "properties": {
                "name": {
                    "type": "text",
                    "analyzer": "ja_cjk",
                    "fields": {"keyword": {"type": "keyword", "ignore_above": 256}},
                },
                "mail": {"type": "keyword", "ignore_above": 256},
                "meta": {"type": "text", "analyzer": "ja_cjk"},
                "body_html": {"type": "text", "analyzer": "ja_cjk_html"},
                "title": {
                    "type": "text",
                    "analyzer": "ja_cjk",
                    "fields": {"keyword": {"type": "keyword", "ignore_above": 256}},
                },
            }
        },
    }


__all__ = [
    "posts_index_mapping",
]
