import io
import logging
import re
from typing import Any

import yaml

from ..core.ports import FrontmatterCodec

logger = logging.getLogger(__name__)

_FM = re.compile(r"^---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)


class YamlFrontmatter(FrontmatterCodec):
    def split(self, text: str) -> tuple[dict[str, Any], int]:
        m = _FM.match(text)
        if not m:
            return {}, 0
        try:
            fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        except yaml.YAMLError as e:
            logger.debug("Unreadable frontmatter: %s", e)
            fm = {}
        if not isinstance(fm, dict):
            fm = {}
        return fm, m.end()
