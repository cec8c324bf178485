"""
Artifact copying — stage inputs into the build context and bring the
built kernel and device-tree blobs back.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path

from rebuild_kernel.core.errors import ArtifactCopyError

logger = logging.getLogger(__name__)


def copy_file(dest: Path, src: Path) -> None:
    """Copy ``src`` to ``dest`` and give ``dest`` the permission bits of ``src``.

    Raises:
        ArtifactCopyError: Naming both paths.
    """
    try:
        shutil.copyfile(src, dest)
        shutil.copymode(src, dest)
    except OSError as e:
        raise ArtifactCopyError(f"copying {src} to {dest}: {e}") from e


def stage_inputs(paths: Iterable[Path], context_dir: Path) -> list[Path]:
    """Copy each file into ``context_dir`` under its base name."""
    staged = []
    for path in paths:
        target = context_dir / path.name
        copy_file(target, path)
        staged.append(target)
    logger.debug("Staged %d files into %s", len(staged), context_dir)
    return staged


def retrieve_artifacts(context_dir: Path, destinations: Mapping[str, Path]) -> list[Path]:
    """Copy each named build output from ``context_dir`` onto its destination."""
    written = []
    for name, dest in destinations.items():
        copy_file(dest, context_dir / name)
        logger.info("Updated %s", dest)
        written.append(dest)
    return written
