"""
OpenAI adapter implementation for LLM operations.
"""

import logging
from typing import Any, TypedDict, cast

from openai import OpenAI
from openai.types.chat import ChatCompletionMessageParam
from typing_extensions import override

from agentfs.config.settings import settings
from agentfs.exceptions import LLMError
from agentfs.ports.llm.llm_port import LLMPort


class OpenAIMessageDict(TypedDict):
    content: str


class OpenAIChoiceDict(TypedDict):
    message: OpenAIMessageDict


class OpenAIResponseDict(TypedDict):
    choices: list[OpenAIChoiceDict]


class OpenAIAdapter(LLMPort):
    """OpenAI (or any OpenAI-compatible endpoint) implementation of the LLM port."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        api_base: str | None = None,
        max_retries: int | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the OpenAI adapter.

        Rate limits, server errors and connection failures are retried by the
        client itself with exponential backoff.

        Args:
            api_key: OpenAI API key (defaults to settings)
            model: Model name (defaults to settings)
            api_base: API base URL (defaults to settings)
            max_retries: Client retries for transient errors (defaults to settings)
            logger: Logger instance to use for logging. If None, a default logger will be created.
        """
        self.api_key: str = api_key or settings.openai_api_key
        self.model: str = model or settings.openai_model
        self.api_base: str | None = api_base or settings.openai_api_base
        self.max_retries: int = (
            settings.max_retries if max_retries is None else max_retries
        )
        self._logger: logging.Logger = logger or logging.getLogger(__name__)

        self.client: OpenAI = OpenAI(
            api_key=self.api_key, base_url=self.api_base, max_retries=self.max_retries
        )

    def _prepare_messages(
        self, prompt: str, system_message: str
    ) -> list[ChatCompletionMessageParam]:
        """
        Prepare the messages for the OpenAI API.

        Args:
            prompt: The user's prompt
            system_message: The system message to set the context

        Returns:
            List of message dictionaries
        """
        return cast(
            list[ChatCompletionMessageParam],
            [
                {"role": "system", "content": system_message},
                {"role": "user", "content": prompt},
            ],
        )

    def _extract_response_content(self, response: object) -> str:
        """
        Extract content from the OpenAI response.

        Args:
            response: The response from OpenAI API (object or dict form)

        Returns:
            The extracted content

        Raises:
            LLMError: If response is empty or invalid
        """
        if hasattr(response, "model_dump"):
            response = response.model_dump()  # type: ignore[union-attr]
        resp: OpenAIResponseDict = cast(OpenAIResponseDict, response)
        choices = resp.get("choices", [])
        if not choices:
            raise LLMError("No response generated from the model")
        message = choices[0].get("message")
        if not message:
            raise LLMError("Malformed response: missing message")
        content = message.get("content")
        if content:
            return content.strip()
        raise LLMError("Empty response received from the model")

    def _coerce_params(self, kwargs: dict[str, Any]) -> tuple[float, int]:
        temperature = kwargs.get("temperature", 0.7)
        try:
            temperature = float(temperature)
        except (TypeError, ValueError):
            temperature = 0.7
        max_tokens = kwargs.get("max_tokens", 1000)
        try:
            max_tokens = int(max_tokens)
        except (TypeError, ValueError):
            max_tokens = 1000
        return temperature, max_tokens

    @override
    def execute_with_system_message(
        self, prompt: str, system_message: str, **kwargs: Any
    ) -> str:
        """
        Generate a response from the OpenAI model with a custom system message.

        Args:
            prompt: The input prompt for text generation
            system_message: The system message to set the context
            **kwargs: Additional model parameters (temperature, max_tokens, etc.)

        Returns:
            Generated text response

        Raises:
            LLMError: If text generation fails
        """
        try:
            temperature, max_tokens = self._coerce_params(kwargs)
            response = self.client.chat.completions.create(
                model=self.model,
                messages=self._prepare_messages(prompt, system_message),
                temperature=temperature,
                max_tokens=max_tokens,
            )
            return self._extract_response_content(response)
        except LLMError:
            raise
        except Exception as e:
            self._logger.error(f"Request to {self.model} failed: {e}")
            raise LLMError(f"Failed to generate response: {str(e)}")
