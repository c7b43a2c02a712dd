import re
import secrets
import string

from ..core.ports import AnchorIdGenerator, RandomSource

SEPARATOR = "-"
SUFFIX_ALPHABET = string.digits + string.ascii_lowercase

_INVALID_RE = re.compile(r"[^0-9a-zA-Z\-]")


def anchor_prefix(title: str) -> str:
    """Title with spaces as hyphens and anything else non-alphanumeric dropped."""
    return _INVALID_RE.sub("", title.replace(" ", SEPARATOR))


class TitleAnchorId(AnchorIdGenerator):
    """
    "Remember this" -> "Remember-this-k3x9".

    Titles without any usable character still get an id ("-k3x9").
    """

    def __init__(self, suffix_length: int = 4, rng: RandomSource | None = None):
        self.suffix_length = suffix_length
        self.rng = rng if rng is not None else secrets.SystemRandom()

    def suffix(self) -> str:
        return "".join(self.rng.choice(SUFFIX_ALPHABET) for _ in range(self.suffix_length))

    def new_id(self, title: str) -> str:
        return anchor_prefix(title) + SEPARATOR + self.suffix()
