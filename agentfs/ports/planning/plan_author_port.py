"""
Plan author port: drafts the plan text for a task.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping


class PlanAuthorPort(ABC):
    """Port interface for producing plan content from a task description."""

    @abstractmethod
    def draft(self, task: str, context: Mapping[str, Any]) -> str:
        """
        Produce plan content containing a ``STEPS:`` section of numbered lines.

        Args:
            task: Task description
            context: Creation context (working directory, timestamp, ...)

        Returns:
            Plan content text

        Raises:
            LLMError: If the plan cannot be produced
        """
        pass
