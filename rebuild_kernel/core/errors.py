"""
Error types — one per failure category of a rebuild run.

Every failure is fatal. The CLI catches ``RebuildError`` at the top,
prints the message and exits non-zero; nothing below it retries.
"""

from __future__ import annotations


class RebuildError(Exception):
    """Base class for all fatal rebuild failures."""


class RuntimeNotFoundError(RebuildError):
    """No container runtime from the candidate list is on PATH."""


class ToolchainError(RebuildError):
    """The host toolchain could not be queried or failed to build the helper."""


class InputNotFoundError(RebuildError):
    """A required input file exists in none of the searched locations."""


class KernelSourceError(RebuildError):
    """The kernel source URL could not be determined."""


class DownloadError(RebuildError):
    """The kernel source download failed."""


class ContainerError(RebuildError):
    """The container image build or the container run failed."""


class ArtifactCopyError(RebuildError):
    """An input, generated file or build artifact could not be written."""
