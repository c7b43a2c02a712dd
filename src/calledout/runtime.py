"""Runtime wiring helper for CLI and API applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.idgen import TitleAnchorId
from .adapters.link_format import get_link_formatter
from .adapters.markdown_parser import MarkdownParser
from .adapters.yaml_codec import YamlFrontmatter
from .config import CalledOutConfig, load_config
from .core.linker import AnchorLinker, CalloutLinker
from .core.vault import Vault


@dataclass
class Runtime:
    """Container for all wired components."""
    vault: Vault
    storage: FsStorage
    linker: CalloutLinker
    config: CalledOutConfig


def build_runtime(
    vault_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    # CLI args win over config values
    if vault_path is None:
        vault_path = config.vault.root

    storage = FsStorage(vault_path)
    codec = YamlFrontmatter()
    vault = Vault(storage, MarkdownParser(codec), codec)

    anchor_linker = AnchorLinker(
        TitleAnchorId(suffix_length=config.anchor.suffix_length),
        get_link_formatter(config.link.style),
    )

    return Runtime(
        vault=vault,
        storage=storage,
        linker=CalloutLinker(vault, anchor_linker),
        config=config,
    )
