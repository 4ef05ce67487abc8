from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from etch_broker.core.types import Post
from etch_broker.records.identity import document_id


@dataclass(frozen=True)
class PostDoc:
    doc_id: str
    name: str
    mail: str
    meta: str
    body_html: str
    title: str

    @classmethod
    def from_post(cls, post: Post) -> PostDoc:
        return cls(
            doc_id=document_id(post.locator, post.n),
            name=post.name,
            mail=post.mail,
            meta=post.meta,
            body_html=post.body,
            title=post.title,
        )

    def to_es(self) -> dict[str, Any]:
        d = asdict(self)
        # ID는 _id로 보내므로 본문에서는 제외
        del d["doc_id"]
        return d
