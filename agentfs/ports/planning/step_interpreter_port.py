"""
Step interpreter port: translates one plan step into mutation requests.
"""

from abc import ABC, abstractmethod

from agentfs.entities.mutation import MutationRequest
from agentfs.entities.plan import StepContext


class StepInterpreterPort(ABC):
    """Port interface for turning a step description into file operations."""

    @abstractmethod
    def interpret(self, step: str, context: StepContext) -> list[MutationRequest]:
        """
        Translate a step into an ordered list of mutation requests.

        Implementations must not touch the workspace themselves; the plan
        runner applies the returned requests.

        Args:
            step: Step description text
            context: Plan id, step index and original task context

        Returns:
            Ordered list of requests, possibly empty

        Raises:
            InterpreterError: If the step cannot be translated
        """
        pass
