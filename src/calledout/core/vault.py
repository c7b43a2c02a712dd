from collections.abc import Iterable

from .model import Document, DocId
from .ports import FrontmatterCodec, ParserStrategy, StorageStrategy


class Vault:
    def __init__(
        self, storage: StorageStrategy, parser: ParserStrategy, codec: FrontmatterCodec
    ):
        self.storage = storage
        self.parser = parser
        self.codec = codec

    def get(self, id: DocId) -> Document | None:
        """Read one snapshot; blocks and metadata come from that same text."""
        raw = self.storage.read_raw(id)
        if raw is None:
            return None
        meta, _body_start = self.codec.split(raw)
        return Document(id=id, text=raw, blocks=tuple(self.parser.parse(raw)), meta=meta)

    def replace(self, id: DocId, contents: str, expected: str | None = None) -> None:
        # whole-document write; storage raises StaleDocumentError on mismatch
        self.storage.write_raw(id, contents, expected=expected)

    def list_ids(self) -> Iterable[DocId]:
        return self.storage.list_all_ids()
