"""
Step interpreter backed by a language model.
"""

import json
import logging
import re
from typing import Any, Optional

from typing_extensions import override

from agentfs.entities.mutation import MutationRequest, request_from_dict
from agentfs.entities.plan import StepContext
from agentfs.exceptions import InterpreterError, LLMError
from agentfs.ports.llm.llm_port import LLMPort
from agentfs.ports.planning.step_interpreter_port import StepInterpreterPort

STEP_SYSTEM_PROMPT = """You are a task execution expert. Given a step from a plan, determine what file operations to take.

Available file operations (paths are relative to the workspace root):
- CREATE file: { "action": "create", "path": "...", "content": "..." }
- READ file: { "action": "read", "path": "..." }
- EDIT file: { "action": "edit", "path": "...", "mode": "replace|insert|find-replace|append", "content": "...", "search": "...", "replace": "...", "line": 0 }
- DELETE file: { "action": "delete", "path": "..." }

Respond with a JSON array of actions to execute, in order:
[
  { "action": "create", "path": "src/index.js", "content": "console.log('hello');" }
]

If no file operations are needed, return: []"""

_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def parse_actions(text: str) -> list[MutationRequest]:
    """
    Parse the first JSON array in a model reply into mutation requests.

    A reply without any array means the step needs no file operations.

    Raises:
        InterpreterError: If the array is not valid JSON or holds non-objects
    """
    match = _ARRAY_RE.search(text or "")
    if not match:
        return []
    try:
        items = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise InterpreterError(f"Could not parse actions: {e}")
    if not isinstance(items, list):
        raise InterpreterError("Actions must be a JSON array")
    requests: list[MutationRequest] = []
    for item in items:
        if not isinstance(item, dict):
            raise InterpreterError(f"Action must be an object, got: {item!r}")
        requests.append(request_from_dict(item))
    return requests


class LLMStepInterpreter(StepInterpreterPort):
    """Asks the LLM for a JSON action list and converts it into requests."""

    def __init__(
        self,
        llm: LLMPort,
        temperature: float = 0.2,
        max_tokens: int = 4000,
        logger: Optional[logging.Logger] = None,
    ):
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._logger = logger or logging.getLogger(__name__)

    def _build_prompt(self, step: str, context: StepContext) -> str:
        payload: dict[str, Any] = context.to_dict()
        return (
            f"Step: {step}\n\n"
            f"Context: {json.dumps(payload, indent=2, ensure_ascii=False, default=str)}"
        )

    @override
    def interpret(self, step: str, context: StepContext) -> list[MutationRequest]:
        self._logger.info(f"Interpreting step {context.step_index + 1}: {step}")
        try:
            reply = self._llm.execute_with_system_message(
                self._build_prompt(step, context),
                STEP_SYSTEM_PROMPT,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except LLMError as e:
            raise InterpreterError(f"Interpreter request failed: {e}")
        requests = parse_actions(reply)
        self._logger.info(f"Step {context.step_index + 1} produced {len(requests)} action(s)")
        return requests
