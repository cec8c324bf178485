"""
Domain models — Pydantic types for a rebuild run.

All models are re-exported here for convenient access:

    from rebuild_kernel.core.models import Action, Receipt, BuildParams
"""

from rebuild_kernel.core.models.action import Action, Receipt
from rebuild_kernel.core.models.build import BuildParams
from rebuild_kernel.core.models.runtime import ContainerRuntime, RuntimeProfile
from rebuild_kernel.core.models.template import GeneratedFile

__all__ = [
    "Action",
    "BuildParams",
    "ContainerRuntime",
    "GeneratedFile",
    "Receipt",
    "RuntimeProfile",
]
