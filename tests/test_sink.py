"""
Tests for etch_broker.indexstore.sink.IndexSink.

async_bulk is patched, so no Elasticsearch server is needed.
"""

from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch.helpers import BulkIndexError, expand_action

from etch_broker.core.errors import IndexSubmitError
from etch_broker.core.types import Post
from etch_broker.indexstore import ESConfig, IndexSink, PostDoc
from tests.fakes import THREAD_A

BULK = "etch_broker.indexstore.sink.async_bulk"


def _post(n=1, locator=THREAD_A, **fields):
    values = {"name": "Alice", "mail": "sage", "meta": "meta", "body": "<b>hi</b>", "title": ""}
    values.update(fields)
    return Post(locator=locator, n=n, **values)


class TestPostDoc:
    """Tests for PostDoc conversion"""

    def test_from_post_maps_body_to_body_html(self):
        doc = PostDoc.from_post(_post(n=3, title="T"))

        assert doc.doc_id == "board.example-thread-42:3"
        assert doc.to_es() == {
            "name": "Alice",
            "mail": "sage",
            "meta": "meta",
            "body_html": "<b>hi</b>",
            "title": "T",
        }


class TestBuildActions:
    """Tests for IndexSink.build_actions()"""

    def test_upsert_action_shape(self, es_cfg):
        sink = IndexSink(MagicMock(), es_cfg)

        (action,) = sink.build_actions([_post(n=1, title="My Title")])

        assert action == {
            "_op_type": "index",
            "_index": "etch",
            "_id": "board.example-thread-42:1",
            "_source": {
                "name": "Alice",
                "mail": "sage",
                "meta": "meta",
                "body_html": "<b>hi</b>",
                "title": "My Title",
            },
        }

    def test_keeps_post_order(self, es_cfg):
        sink = IndexSink(MagicMock(), es_cfg)

        actions = sink.build_actions([_post(n=n) for n in (2, 1, 5)])

        assert [a["_id"].rsplit(":", 1)[1] for a in actions] == ["2", "1", "5"]

    def test_default_config_sends_no_type(self, monkeypatch):
        monkeypatch.delenv("ES_DOC_TYPE", raising=False)
        sink = IndexSink(MagicMock(), ESConfig(es_url="http://es.test:9200"))

        (action,) = sink.build_actions([_post()])

        assert "_type" not in action
        assert set(expand_action(action)[0]["index"]) == {"_index", "_id"}

    def test_doc_type_is_opt_in(self, es_cfg):
        sink = IndexSink(MagicMock(), replace(es_cfg, doc_type="post"))

        (action,) = sink.build_actions([_post()])

        assert action["_type"] == "post"


class TestSubmit:
    """Tests for IndexSink.submit()"""

    @pytest.mark.asyncio
    async def test_single_bulk_request_per_batch(self, es_cfg):
        es = MagicMock()
        sink = IndexSink(es, es_cfg)
        posts = [_post(n=1), _post(n=2)]

        with patch(BULK, new_callable=AsyncMock, return_value=(2, [])) as bulk:
            result = await sink.submit(posts)

        assert result.ok
        assert result.submitted == 2
        bulk.assert_awaited_once()
        args, kwargs = bulk.call_args
        assert args[0] is es
        assert [a["_id"] for a in args[1]] == [
            "board.example-thread-42:1",
            "board.example-thread-42:2",
        ]
        assert kwargs["refresh"] is False

    @pytest.mark.asyncio
    async def test_refresh_wait_for(self, es_cfg):
        sink = IndexSink(MagicMock(), replace(es_cfg, refresh=True))

        with patch(BULK, new_callable=AsyncMock, return_value=(1, [])) as bulk:
            await sink.submit([_post()])

        assert bulk.call_args.kwargs["refresh"] == "wait_for"

    @pytest.mark.asyncio
    async def test_empty_batch_is_a_no_op(self, es_cfg):
        sink = IndexSink(MagicMock(), es_cfg)

        with patch(BULK, new_callable=AsyncMock) as bulk:
            result = await sink.submit([])

        assert result.ok
        assert result.submitted == 0
        bulk.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bulk_index_error_is_returned(self, es_cfg, caplog):
        sink = IndexSink(MagicMock(), es_cfg)
        item_errors = [{"index": {"_id": "board.example-thread-42:1", "status": 400}}]
        error = BulkIndexError("1 document(s) failed to index.", item_errors)

        with patch(BULK, new_callable=AsyncMock, side_effect=error):
            result = await sink.submit([_post()])

        assert not result.ok
        assert isinstance(result.error, IndexSubmitError)
        assert result.error.errors == item_errors
        assert any(r.levelname == "ERROR" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_transport_error_is_returned(self, es_cfg):
        sink = IndexSink(MagicMock(), es_cfg)

        with patch(BULK, new_callable=AsyncMock, side_effect=ESConnectionError("refused")):
            result = await sink.submit([_post()])

        assert not result.ok
        assert result.submitted == 0

    @pytest.mark.asyncio
    async def test_invalid_locator_is_returned(self, es_cfg):
        sink = IndexSink(MagicMock(), es_cfg)

        with patch(BULK, new_callable=AsyncMock) as bulk:
            result = await sink.submit([_post(locator="not a url")])

        assert not result.ok
        bulk.assert_not_awaited()
