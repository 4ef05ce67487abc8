"""Core 타입, 예외 및 프로토콜.

이 모듈은 인프라에 의존하지 않습니다.
source, indexstore, sync 등 어디서든 import할 수 있습니다.
"""

from etch_broker.core.errors import (
    EtchBrokerError,
    IndexSubmitError,
    InvalidLocatorError,
    RecordParseError,
    SourceFetchError,
    SourceUnavailableError,
    UnknownEventKind,
)
from etch_broker.core.protocols import (
    EventSourceProtocol,
    PostSinkProtocol,
    ThreadIndexerProtocol,
    ThreadSourceProtocol,
)
from etch_broker.core.types import (
    DispatchStats,
    FetchResult,
    Post,
    SubmitResult,
    SyncSummary,
    ThreadIndexResult,
)

__all__ = [
    # Errors
    "EtchBrokerError",
    "IndexSubmitError",
    "InvalidLocatorError",
    "RecordParseError",
    "SourceFetchError",
    "SourceUnavailableError",
    "UnknownEventKind",
    # Types
    "Post",
    "FetchResult",
    "SubmitResult",
    "ThreadIndexResult",
    "SyncSummary",
    "DispatchStats",
    # Protocols
    "ThreadSourceProtocol",
    "EventSourceProtocol",
    "PostSinkProtocol",
    "ThreadIndexerProtocol",
]
