"""
Tests for etch_broker.migrations (index mapping + Migrator).

Elasticsearch is a MagicMock; only the calls made against it are checked.
"""

from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest
from elasticsearch import Elasticsearch

from etch_broker.indexstore.client import client_kwargs, create_es_client
from etch_broker.migrations.mappings import posts_index_mapping
from etch_broker.migrations.migrate import Migrator, _format_bytes, cmd_drop, cmd_recreate, main


def _es(exists: bool) -> MagicMock:
    es = MagicMock()
    es.indices.exists.return_value = exists
    return es


class TestMapping:
    """Tests for posts_index_mapping()"""

    def test_document_fields(self):
        properties = posts_index_mapping()["mappings"]["properties"]

        assert set(properties) == {"name", "mail", "meta", "body_html", "title"}
        assert properties["mail"]["type"] == "keyword"

    def test_body_analyzer_is_defined(self):
        mapping = posts_index_mapping()
        analyzer = mapping["mappings"]["properties"]["body_html"]["analyzer"]

        assert analyzer in mapping["settings"]["analysis"]["analyzer"]


class TestMigrator:
    """Tests for Migrator"""

    def test_create_when_missing(self, es_cfg):
        es = _es(exists=False)

        assert Migrator(es, es_cfg).create() is True

        es.indices.create.assert_called_once()
        assert es.indices.create.call_args.kwargs["index"] == "etch"

    def test_create_skips_existing(self, es_cfg):
        es = _es(exists=True)

        assert Migrator(es, es_cfg).create() is False

        es.indices.create.assert_not_called()

    def test_create_existing_without_skip_raises(self, es_cfg):
        with pytest.raises(ValueError):
            Migrator(_es(exists=True), es_cfg).create(skip_existing=False)

    def test_drop(self, es_cfg):
        es = _es(exists=True)

        assert Migrator(es, es_cfg).drop() is True

        es.indices.delete.assert_called_once_with(index="etch")

    def test_drop_missing(self, es_cfg):
        es = _es(exists=False)

        assert Migrator(es, es_cfg).drop() is False

        es.indices.delete.assert_not_called()

    def test_status(self, es_cfg):
        es = _es(exists=True)
        es.indices.stats.return_value = {
            "indices": {
                "etch": {"primaries": {"docs": {"count": 42}, "store": {"size_in_bytes": 2048}}}
            }
        }

        info = Migrator(es, es_cfg).status()

        assert info.exists
        assert (info.doc_count, info.size_bytes) == (42, 2048)

    def test_status_missing(self, es_cfg):
        info = Migrator(_es(exists=False), es_cfg).status()

        assert not info.exists
        assert info.doc_count == 0


class TestCommands:
    """Tests for the destructive CLI commands"""

    def test_drop_requires_confirm(self, es_cfg):
        es = _es(exists=True)

        assert cmd_drop(Migrator(es, es_cfg), confirm=False) == 1

        es.indices.delete.assert_not_called()

    def test_recreate_requires_confirm(self, es_cfg):
        es = _es(exists=True)

        assert cmd_recreate(Migrator(es, es_cfg), confirm=False) == 1

        es.indices.delete.assert_not_called()
        es.indices.create.assert_not_called()

    def test_no_command_prints_help(self):
        assert main([]) == 1

    def test_unreachable_es(self):
        es = MagicMock()
        es.ping.return_value = False

        with patch("etch_broker.migrations.migrate.create_es_client", return_value=es):
            assert main(["--es", "http://es.test:9200", "status"]) == 1

    def test_format_bytes(self):
        assert _format_bytes(512) == "512.0 B"
        assert _format_bytes(2048) == "2.0 KB"

    def test_uses_sync_client(self):
        es = MagicMock()
        es.ping.return_value = False

        with patch("etch_broker.migrations.migrate.create_es_client", return_value=es) as factory:
            main(["status"])

        assert factory.call_args.kwargs["client_cls"] is Elasticsearch


class TestCreateEsClient:
    """Tests for the shared create_es_client() factory"""

    def test_no_auth(self, es_cfg):
        client_cls = MagicMock()

        create_es_client(es_cfg, client_cls=client_cls)

        client_cls.assert_called_once_with(
            hosts=["http://es.test:9200"], verify_certs=True, request_timeout=5
        )

    def test_basic_auth(self, es_cfg):
        client_cls = MagicMock()
        cfg = replace(es_cfg, es_username="elastic", es_password="secret")

        create_es_client(cfg, client_cls=client_cls)

        assert client_cls.call_args.kwargs["basic_auth"] == ("elastic", "secret")

    def test_password_without_username_is_ignored(self, es_cfg):
        assert "basic_auth" not in client_kwargs(replace(es_cfg, es_password="secret"))

    def test_empty_url_raises(self, es_cfg):
        with pytest.raises(ValueError):
            create_es_client(replace(es_cfg, es_url=""), client_cls=MagicMock())
