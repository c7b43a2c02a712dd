"""Reference text pointing at a block: wiki-style or plain Markdown."""

from urllib.parse import quote

from ..core.ports import LinkFormatter


class WikiLinkFormatter(LinkFormatter):
    """``[[id#^anchor|Title]]``"""

    def format(self, doc_id: str, anchor: str | None, display: str) -> str:
        target = doc_id if anchor is None else f"{doc_id}#^{anchor}"
        if not display or display == doc_id:
            return f"[[{target}]]"
        return f"[[{target}|{display}]]"


class MarkdownLinkFormatter(LinkFormatter):
    """``[Title](path%20to/id.md#^anchor)``"""

    def format(self, doc_id: str, anchor: str | None, display: str) -> str:
        target = quote(f"{doc_id}.md")
        if anchor is not None:
            target += f"#^{anchor}"
        return f"[{display}]({target})"


def get_link_formatter(style: str) -> LinkFormatter:
    if style == "wiki":
        return WikiLinkFormatter()
    elif style == "markdown":
        return MarkdownLinkFormatter()
    else:
        raise ValueError(f"Unknown link style: {style}")
