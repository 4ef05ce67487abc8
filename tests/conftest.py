"""
Pytest configuration and shared fixtures for etch_broker tests.

This module provides:
- aioresponses fixture for mocking the etch HTTP server
- Config fixtures that never read the environment
"""

import sys
from pathlib import Path

import pytest
from aioresponses import aioresponses

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from etch_broker.indexstore.config import ESConfig  # noqa: E402
from etch_broker.source.config import SourceConfig  # noqa: E402
from tests.fakes import ETCH_URL  # noqa: E402


@pytest.fixture
def mock_aioresponse():
    with aioresponses() as m:
        yield m


@pytest.fixture
def source_cfg() -> SourceConfig:
    return SourceConfig(
        etch_url=ETCH_URL,
        encoding="cp932",
        fetch_max_attempts=5,
        fetch_retry_delay_s=0.0,
        request_timeout_s=5.0,
    )


@pytest.fixture
def es_cfg() -> ESConfig:
    return ESConfig(
        es_url="http://es.test:9200",
        es_username=None,
        es_password=None,
        verify_certs=True,
        request_timeout_s=5,
        index_name="etch",
        doc_type="",
        refresh=False,
    )
