"""
Input resolution — locate the static files a rebuild needs.

Each file is looked up in the current directory first, then in the
kernel repository below the toolchain root. The first missing file
aborts the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rebuild_kernel.core.errors import InputNotFoundError
from rebuild_kernel.core.models.build import (
    BUILDER_SOURCE,
    DEVICE_TREE_BLOBS,
    KERNEL_IMAGE,
    PATCH_FILES,
)

logger = logging.getLogger(__name__)


@dataclass
class ResolvedInputs:
    """Paths of every input file, keyed the way the pipeline uses them."""

    patches: list[Path] = field(default_factory=list)
    kernel_image: Path | None = None
    device_tree_blobs: dict[str, Path] = field(default_factory=dict)
    builder_source: Path | None = None

    def artifact_destinations(self) -> dict[str, Path]:
        """Map each build artifact name to the path it overwrites."""
        if self.kernel_image is None:
            raise InputNotFoundError(f"{KERNEL_IMAGE} was not resolved")
        return {KERNEL_IMAGE: self.kernel_image, **self.device_tree_blobs}


def find_input(filename: str, search_root: Path, cwd: Path | None = None) -> Path:
    """Return a path to ``filename``: in ``cwd`` if present, else in ``search_root``.

    The cwd hit is returned relative (as given), like the file name the
    operator sees in their tree.

    Raises:
        InputNotFoundError: Naming both locations checked.
    """
    local = Path(filename)
    if cwd is not None:
        local = cwd / filename
    if local.exists():
        return local

    fallback = search_root / filename
    if fallback.exists():
        return fallback

    raise InputNotFoundError(
        f"could not find file {filename!r} (looked in {cwd or '.'} and {fallback})"
    )


def resolve_inputs(
    search_root: Path,
    cwd: Path | None = None,
    *,
    need_builder_source: bool = True,
) -> ResolvedInputs:
    """Resolve all required inputs, failing on the first one missing."""
    inputs = ResolvedInputs()

    for filename in PATCH_FILES:
        inputs.patches.append(find_input(filename, search_root, cwd))

    inputs.kernel_image = find_input(KERNEL_IMAGE, search_root, cwd)
    for blob in DEVICE_TREE_BLOBS:
        inputs.device_tree_blobs[blob] = find_input(blob, search_root, cwd)

    if need_builder_source:
        inputs.builder_source = find_input(BUILDER_SOURCE, search_root, cwd)

    logger.debug(
        "Resolved %d patches, kernel image %s",
        len(inputs.patches), inputs.kernel_image,
    )
    return inputs
