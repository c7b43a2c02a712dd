from .model import Callout, Cursor, JumpTarget
from .ports import EditSurface


def jump_target(callout: Callout) -> JumpTarget:
    """
    Land one line above the callout and keep the whole block in view.

    Lines are 0-based; a callout on the first line yields line -1, which
    surfaces clamp.
    """
    start = callout.block.start_line
    end = callout.block.end_line
    return JumpTarget(
        doc_id=callout.doc_id,
        cursor=Cursor(start - 1, 0),
        scroll_from=Cursor(start - 1, 0),
        scroll_to=Cursor(end + 1, 0),
    )


def jump(callout: Callout, surface: EditSurface) -> JumpTarget:
    target = jump_target(callout)
    surface.open(target.doc_id)
    surface.set_cursor(target.cursor)
    surface.scroll_into_view(target.scroll_from, target.scroll_to, center=True)
    return target
