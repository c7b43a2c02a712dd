"""Shared fixtures for calledout tests."""

import itertools
import tempfile
from pathlib import Path

import pytest

from calledout.adapters.fs_storage import FsStorage
from calledout.adapters.idgen import TitleAnchorId
from calledout.adapters.link_format import WikiLinkFormatter
from calledout.adapters.markdown_parser import MarkdownParser
from calledout.adapters.yaml_codec import YamlFrontmatter
from calledout.core.linker import AnchorLinker, CalloutLinker
from calledout.core.vault import Vault

SCENARIO = "# Notes\n>[!note] Remember this\n>More text\n"


class StubRandom:
    """Deterministic stand-in for the id suffix random source."""

    def __init__(self, chars: str = "abcd"):
        self._chars = itertools.cycle(chars)

    def choice(self, seq):
        return next(self._chars)


def make_vault(root: Path) -> Vault:
    codec = YamlFrontmatter()
    return Vault(FsStorage(root), MarkdownParser(codec), codec)


@pytest.fixture
def vault_root():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def vault(vault_root):
    return make_vault(vault_root)


@pytest.fixture
def anchor_linker():
    return AnchorLinker(TitleAnchorId(rng=StubRandom()), WikiLinkFormatter())


@pytest.fixture
def linker(vault, anchor_linker):
    return CalloutLinker(vault, anchor_linker)
