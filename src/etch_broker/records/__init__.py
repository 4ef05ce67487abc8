"""레코드 파싱 및 문서 ID 생성 (순수 함수, I/O 없음)."""

from .identity import document_id, thread_key
from .parser import DEFAULT_ENCODING, FIELD_DELIMITER, parse_record, split_records

__all__ = [
    "DEFAULT_ENCODING",
    "FIELD_DELIMITER",
    "document_id",
    "thread_key",
    "parse_record",
    "split_records",
]
