"""etch 캐시 서버의 스레드 게시글을 Elasticsearch에 동기화하는 브로커.

주요 컴포넌트:
    - records: 레코드 파싱, 문서 ID 생성
    - source: etch 서버 클라이언트 (재시도, 이벤트 스트림)
    - indexstore: Elasticsearch bulk upsert
    - sync: full sync 엔진, 이벤트 디스패처
"""

__version__ = "0.1.0"
