"""
LLM port interface used by the planning adapters.
"""

from abc import ABC, abstractmethod
from typing import Any


class LLMPort(ABC):
    """Port interface for language model operations."""

    @abstractmethod
    def execute_with_system_message(
        self, prompt: str, system_message: str, **kwargs: Any
    ) -> str:
        """
        Send one user prompt under a system message and return the reply text.

        Args:
            prompt: The user prompt (a plan step or a task)
            system_message: Instructions framing the reply format
            **kwargs: Sampling parameters such as temperature and max_tokens

        Returns:
            Reply text with surrounding whitespace removed

        Raises:
            LLMError: If the request fails or the reply is empty
        """
        pass
