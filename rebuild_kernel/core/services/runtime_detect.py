"""
Container runtime detection — pick the engine CLI to drive.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Sequence

from rebuild_kernel.core.errors import RuntimeNotFoundError
from rebuild_kernel.core.models.runtime import (
    RUNTIME_PROFILES,
    ContainerRuntime,
    RuntimeProfile,
    profile_for,
)

logger = logging.getLogger(__name__)


def detect_container_runtime(
    candidates: Sequence[RuntimeProfile] = RUNTIME_PROFILES,
) -> ContainerRuntime:
    """Return the first candidate runtime found on PATH.

    The executable is resolved through symlinks, and the profile is
    chosen by the *resolved* base name: a ``docker`` symlink pointing at
    podman is driven as podman.

    Raises:
        RuntimeNotFoundError: If no candidate is on PATH.
    """
    for candidate in candidates:
        found = shutil.which(candidate.name)
        if found is None:
            logger.debug("Container runtime %s not on PATH", candidate.name)
            continue

        try:
            executable = os.path.realpath(found, strict=True)
        except OSError as e:
            raise RuntimeNotFoundError(f"Cannot resolve {found}: {e}") from e

        name = os.path.basename(executable)
        profile = profile_for(name, default=candidate)
        logger.debug("Using container runtime %s (%s)", name, executable)
        return ContainerRuntime(executable=executable, name=name, profile=profile)

    names = [c.name for c in candidates]
    raise RuntimeNotFoundError(f"None of {names} found in $PATH")
