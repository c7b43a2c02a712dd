"""Configuration loader for calledout.toml."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_NAME = "calledout.toml"


@dataclass
class VaultConfig:
    """Vault-specific configuration."""
    root: Path


@dataclass
class SearchConfig:
    """Fuzzy search configuration."""
    limit: int = 10


@dataclass
class AnchorConfig:
    """Block anchor generation configuration."""
    suffix_length: int = 4


@dataclass
class LinkConfig:
    """Link text configuration: "wiki" or "markdown"."""
    style: str = "wiki"


@dataclass
class EditorConfig:
    """External editor used by ``jump --editor``; empty means $EDITOR."""
    command: str = ""


@dataclass
class CalledOutConfig:
    """Complete calledout configuration."""
    vault: VaultConfig
    search: SearchConfig
    anchor: AnchorConfig
    link: LinkConfig
    editor: EditorConfig


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> CalledOutConfig:
    """
    Load configuration from calledout.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/calledout.toml
    3. vault_path/calledout.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path for fallback search

    Returns:
        CalledOutConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if vault_path:
        search_paths.append(vault_path / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    vault_data = toml_data.get("vault", {})
    vault_config = VaultConfig(
        root=Path(vault_data.get("root", vault_path or Path("./vault"))),
    )

    search_data = toml_data.get("search", {})
    limit = int(search_data.get("limit", 10))
    if limit < 1:
        raise ValueError(f"search.limit must be at least 1, got {limit}")
    search_config = SearchConfig(limit=limit)

    anchor_data = toml_data.get("anchor", {})
    anchor_config = AnchorConfig(
        suffix_length=int(anchor_data.get("suffix_length", 4))
    )

    link_data = toml_data.get("link", {})
    style = link_data.get("style", "wiki")
    if style not in ("wiki", "markdown"):
        raise ValueError(f"Unknown link style in config: {style}")
    link_config = LinkConfig(style=style)

    editor_data = toml_data.get("editor", {})
    editor_config = EditorConfig(command=editor_data.get("command", ""))

    return CalledOutConfig(
        vault=vault_config,
        search=search_config,
        anchor=anchor_config,
        link=link_config,
        editor=editor_config,
    )
