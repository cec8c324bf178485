"""
Configuration loader — optional rebuild-kernel.yml plus toolchain facts.

The tool runs with built-in defaults; a config file only overrides
them. Facts about the host toolchain are queried once at startup and
carried in ``Settings``, which is passed explicitly to the pipeline.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from rebuild_kernel.adapters.base import ExecutionContext
from rebuild_kernel.adapters.shell.toolchain import GoToolchainAdapter
from rebuild_kernel.core.errors import RebuildError, ToolchainError
from rebuild_kernel.core.models.action import Action

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "rebuild-kernel.yml"

# Secondary input location, relative to the toolchain root.
KERNEL_REPO_SUBPATH = Path("src", "github.com", "gokrazy", "kernel")

DEFAULT_BASE_IMAGE = "debian:stretch"
DEFAULT_PACKAGES = ["crossbuild-essential-arm64", "bc", "libssl-dev", "bison", "flex"]
DEFAULT_IMAGE_TAG = "gokr-rebuild-kernel"


class ConfigError(RebuildError):
    """Raised when the configuration file is invalid or unreadable."""


class ToolConfig(BaseModel):
    """User-overridable knobs. Every field has a working default."""

    model_config = ConfigDict(extra="forbid")

    kernel_url: str | None = None   # pins the kernel source; skips scraping
    image_tag: str = DEFAULT_IMAGE_TAG
    base_image: str = DEFAULT_BASE_IMAGE
    packages: list[str] = Field(default_factory=lambda: list(DEFAULT_PACKAGES))
    scratch_parent: str = "/tmp"    # engines only mount from some paths on some hosts


class Settings(BaseModel):
    """Everything the pipeline needs to know about this host and run."""

    config: ToolConfig = Field(default_factory=ToolConfig)
    toolchain_root: Path

    @property
    def search_root(self) -> Path:
        """Secondary directory searched for inputs after the cwd."""
        return self.toolchain_root / KERNEL_REPO_SUBPATH


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for rebuild-kernel.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the config file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> ToolConfig:
    """Load and validate the tool configuration.

    Args:
        path: Explicit path to the config file. If None, searches upward
            and falls back to defaults when nothing is found.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return ToolConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ToolConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return ToolConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def query_toolchain_root(toolchain: GoToolchainAdapter) -> Path:
    """Ask the toolchain for its root directory (``go env GOPATH``).

    Raises:
        ToolchainError: If the query fails or returns nothing.
    """
    if not toolchain.is_available():
        raise ToolchainError(f"{toolchain.name} not found in $PATH")

    receipt = toolchain.dispatch(
        ExecutionContext(
            action=Action(
                id="toolchain-root",
                adapter=toolchain.name,
                params={"operation": "env", "var": "GOPATH"},
            ),
        )
    )
    if receipt.failed:
        raise ToolchainError(f"{receipt.args}: {receipt.error}")
    if not receipt.output:
        raise ToolchainError(f"{receipt.args}: empty output")
    return Path(receipt.output)


def load_settings(
    config_path: Path | None = None,
    toolchain: GoToolchainAdapter | None = None,
) -> Settings:
    """Build ``Settings`` once for the whole process."""
    config = load_config(config_path)
    root = query_toolchain_root(toolchain or GoToolchainAdapter())
    logger.debug("Toolchain root: %s", root)
    return Settings(config=config, toolchain_root=root)
