import re
from dataclasses import dataclass

from ..core.model import CALLOUT_KIND, Block, BlockLabel, Range
from ..core.ports import FrontmatterCodec, ParserStrategy
from .yaml_codec import YamlFrontmatter

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
FENCE_START_RE = re.compile(r"^```(.*)$")
LIST_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+")
CALLOUT_START_RE = re.compile(r"^>\s*\[!")
QUOTE_MARKERS_RE = re.compile(r"^(?:\s*>)+")
LABEL_RE = re.compile(r"(?:^|\s)\^([A-Za-z0-9-]+)\s*$")
# Lines end at "\n" only; str.splitlines also breaks on \x0c, \x85, \u2028 and others.
LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


def split_lines(text: str) -> list[str]:
    """Lines of ``text`` with their terminators, the way editors count them."""
    return LINE_RE.findall(text)


def _label_from_fence_info(info: str) -> BlockLabel | None:
    # e.g. "python ^label"
    for part in info.split():
        if part.startswith("^") and len(part) > 1:
            return BlockLabel(name=part[1:])
    return None


def _label_from_line(line: str) -> BlockLabel | None:
    m = LABEL_RE.search(QUOTE_MARKERS_RE.sub("", line))
    return BlockLabel(name=m.group(1)) if m else None


@dataclass
class _Pending:
    kind: str
    start: int
    start_line: int
    end: int = 0
    end_line: int = 0
    last_line: str = ""
    fence_info: str | None = None

    def extend(self, content: str, end: int, line_no: int) -> None:
        self.last_line = content
        self.end = end
        self.end_line = line_no

    def finish(self) -> Block:
        if self.kind == "fence":
            label = _label_from_fence_info(self.fence_info or "")
        elif self.kind == "yaml":
            label = None
        else:
            label = _label_from_line(self.last_line)
        return Block(
            kind=self.kind,
            range=Range(self.start, self.end),
            start_line=self.start_line,
            end_line=self.end_line,
            label=label,
            fence_info=self.fence_info,
        )


class MarkdownParser(ParserStrategy):
    """
    Line-based block splitter.

    Block ranges end at the last character of the block's last line, before
    its line terminator, and line numbers are 0-based.
    """

    def __init__(self, frontmatter: FrontmatterCodec | None = None):
        self.frontmatter = frontmatter if frontmatter is not None else YamlFrontmatter()

    def parse(self, text: str) -> list[Block]:
        blocks: list[Block] = []
        _meta, body_start = self.frontmatter.split(text)

        pending: _Pending | None = None
        offset = 0

        def close() -> None:
            nonlocal pending
            if pending is not None:
                blocks.append(pending.finish())
                pending = None

        for line_no, ln in enumerate(split_lines(text)):
            content = ln.rstrip("\r\n")
            line_end = offset + len(content)

            if offset < body_start:
                # Frontmatter
                if pending is None:
                    pending = _Pending("yaml", offset, line_no)
                pending.extend(content, line_end, line_no)
                if offset + len(ln) >= body_start:
                    close()

            elif pending is not None and pending.kind == "fence":
                pending.extend(content, line_end, line_no)
                if content.startswith("```"):
                    close()

            elif content.startswith("```"):
                close()
                fence_match = FENCE_START_RE.match(content)
                pending = _Pending("fence", offset, line_no)
                pending.fence_info = fence_match.group(1).strip() if fence_match else ""
                pending.extend(content, line_end, line_no)

            elif not content.strip():
                close()

            elif content.lstrip().startswith(">"):
                if pending is None or pending.kind not in (CALLOUT_KIND, "blockquote"):
                    close()
                    kind = CALLOUT_KIND if CALLOUT_START_RE.match(content.lstrip()) else "blockquote"
                    pending = _Pending(kind, offset, line_no)
                pending.extend(content, line_end, line_no)

            elif HEADING_RE.match(content):
                close()
                pending = _Pending("heading", offset, line_no)
                pending.extend(content, line_end, line_no)
                close()

            elif LIST_ITEM_RE.match(content):
                if pending is None or pending.kind != "list":
                    close()
                    pending = _Pending("list", offset, line_no)
                pending.extend(content, line_end, line_no)

            else:
                # Lazy continuation of paragraphs and list items
                if pending is None or pending.kind not in ("paragraph", "list"):
                    close()
                    pending = _Pending("paragraph", offset, line_no)
                pending.extend(content, line_end, line_no)

            offset += len(ln)

        # An unterminated fence runs to the end of the document
        close()
        return blocks
