"""Plain-data and one-line renderings of callouts and matches."""

from typing import Any

from .core.model import Callout, JumpTarget, MatchResult


def suggestion_text(callout: Callout) -> str:
    """What a picker shows: "Title (type)"."""
    return f"{callout.title} ({callout.type})"


def callout_to_dict(callout: Callout) -> dict[str, Any]:
    return {
        "key": callout.key,
        "id": callout.doc_id,
        "type": callout.type,
        "title": callout.title,
        "anchor": callout.anchor_id,
        "range": {"start": callout.block.range.start, "end": callout.block.range.end},
        "lines": {"start": callout.block.start_line, "end": callout.block.end_line},
    }


def match_to_dict(result: MatchResult) -> dict[str, Any]:
    data = callout_to_dict(result.callout)
    data["score"] = list(result.score)
    data["positions"] = list(result.positions)
    return data


def jump_to_dict(target: JumpTarget) -> dict[str, Any]:
    return {
        "id": target.doc_id,
        "cursor": {"line": target.cursor.line, "ch": target.cursor.ch},
        "scroll": {"from": target.scroll_from.line, "to": target.scroll_to.line},
    }
