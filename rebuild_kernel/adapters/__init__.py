"""Adapters — tool bindings for external programs.

Public re-exports for convenient access.
"""

from rebuild_kernel.adapters.base import Adapter, ExecutionContext
from rebuild_kernel.adapters.containers.runtime import ContainerRuntimeAdapter
from rebuild_kernel.adapters.shell.toolchain import GoToolchainAdapter

__all__ = [
    "Adapter",
    "ContainerRuntimeAdapter",
    "ExecutionContext",
    "GoToolchainAdapter",
]
