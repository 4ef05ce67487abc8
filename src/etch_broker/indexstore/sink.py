"""게시글 배치를 Elasticsearch bulk upsert로 제출."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, TransportError
from elasticsearch.helpers import BulkIndexError, async_bulk

from etch_broker.core.errors import IndexSubmitError, InvalidLocatorError
from etch_broker.core.types import Post, SubmitResult

from .config import ESConfig
from .documents import PostDoc


class IndexSink:
    """스레드 하나 분량의 게시글을 한 번의 bulk 요청으로 색인.

    PostSinkProtocol을 구현합니다. 실패는 예외가 아닌 SubmitResult.error로 돌려줍니다.
    """

    def __init__(
        self,
        es: AsyncElasticsearch,
        cfg: ESConfig,
        *,
        logger: logging.Logger | None = None,
    ):
        self.es = es
        self.cfg = cfg
        self.logger = logger or logging.getLogger(__name__)

    def build_action(self, doc: PostDoc) -> dict[str, Any]:
        """upsert(index) action 생성."""
        action: dict[str, Any] = {
            "_op_type": "index",
            "_index": self.cfg.index_name,
            "_id": doc.doc_id,
            "_source": doc.to_es(),
        }
        if self.cfg.doc_type:
            action["_type"] = self.cfg.doc_type
        return action

    def build_actions(self, posts: Sequence[Post]) -> list[dict[str, Any]]:
        return [self.build_action(PostDoc.from_post(p)) for p in posts]

    async def submit(self, posts: Sequence[Post]) -> SubmitResult:
        """bulk upsert 제출. 성공 건수 반환.

        빈 배치는 요청 없이 submitted=0으로 끝납니다.
        """
        try:
            actions = self.build_actions(posts)
        except InvalidLocatorError as e:
            self.logger.error(f"bulk 요청 생성 실패: {e}")
            return SubmitResult(error=IndexSubmitError(str(e)))

        if not actions:
            return SubmitResult(submitted=0)

        try:
            ok, _ = await async_bulk(
                self.es,
                actions,
                refresh="wait_for" if self.cfg.refresh else False,
            )
        except BulkIndexError as e:
            self.logger.error(f"bulk 색인 실패 ({len(e.errors)}건): {e}")
            return SubmitResult(error=IndexSubmitError(str(e), e.errors))
        except (ApiError, TransportError) as e:
            self.logger.error(f"bulk 요청 실패: {e}")
            return SubmitResult(error=IndexSubmitError(str(e)))

        return SubmitResult(submitted=int(ok))
