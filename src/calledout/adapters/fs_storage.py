import os
import tempfile
from pathlib import Path
from typing import Iterable

from ..core.errors import DocumentNotFound, StaleDocumentError
from ..core.ports import StorageStrategy

SUFFIX = ".md"


class FsStorage(StorageStrategy):
    """Markdown files under ``root``; ids are relative POSIX paths without ".md"."""

    def __init__(self, root: Path):
        self.root = root

    def path(self, id: str) -> Path:
        """File for ``id``; ids leading outside the root ("../x", "/etc/x") do not exist."""
        p = self.root / f"{id}{SUFFIX}"
        if not p.resolve().is_relative_to(self.root.resolve()):
            raise DocumentNotFound(id)
        return p

    def read_raw(self, id: str) -> str | None:
        try:
            p = self.path(id)
        except DocumentNotFound:
            return None
        if not p.exists():
            return None
        # newline="" keeps "\r\n" so offsets match the file on disk
        with open(p, encoding="utf-8", newline="") as f:
            return f.read()

    def write_raw(self, id: str, contents: str, expected: str | None = None) -> None:
        p = self.path(id)
        if expected is not None and self.read_raw(id) != expected:
            raise StaleDocumentError(id)
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=p.parent, prefix=f".{p.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
                tmp.write(contents)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, p)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def list_all_ids(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        ids = []
        for p in self.root.rglob(f"*{SUFFIX}"):
            rel = p.relative_to(self.root)
            # .obsidian, .trash, editor swap files, ...
            if any(part.startswith(".") for part in rel.parts):
                continue
            if not p.is_file():
                continue
            ids.append(rel.with_suffix("").as_posix())
        return sorted(ids)
