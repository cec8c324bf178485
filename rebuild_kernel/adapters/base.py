"""
Adapter base — the protocol contract between the pipeline and tools.

This defines the abstract interface that every adapter must implement.
The pipeline only talks to external tools through this protocol.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from rebuild_kernel.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action.

    This is the adapter's view of the world: the action to perform,
    the directory to run in, and extra environment variables.
    """

    action: Action
    working_dir: str = "."
    env: dict[str, str] = Field(default_factory=dict)

    @property
    def params(self) -> dict[str, Any]:
        return self.action.params


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'go', 'container')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter's underlying tool is available.

        Should be fast and never raise.
        """

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def dispatch(self, context: ExecutionContext) -> Receipt:
        """Validate, then execute. Validation failures become receipts."""
        is_valid, error_msg = self.validate(context)
        if not is_valid:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Validation failed: {error_msg}",
            )
        return self.execute(context)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
