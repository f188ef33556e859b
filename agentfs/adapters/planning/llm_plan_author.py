"""
Plan author backed by a language model.
"""

import json
import logging
from typing import Any, Mapping, Optional

from typing_extensions import override

from agentfs.ports.llm.llm_port import LLMPort
from agentfs.ports.planning.plan_author_port import PlanAuthorPort

PLAN_SYSTEM_PROMPT = """You are a task planning expert. Break down complex tasks into clear, executable steps.

Your job is to:
1. Analyze the user's request
2. Break it down into logical steps
3. Provide actionable instructions
4. Consider dependencies between steps
5. Suggest file operations when relevant

Format your response as:
PLAN: [Brief task summary]

STEPS:
1. [Step description]
2. [Step description]
...

FILES TO CREATE/MODIFY:
- [file path]: [purpose]

CONSIDERATIONS:
- [Important notes or warnings]"""


class LLMPlanAuthor(PlanAuthorPort):
    def __init__(
        self,
        llm: LLMPort,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        logger: Optional[logging.Logger] = None,
    ):
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._logger = logger or logging.getLogger(__name__)

    @override
    def draft(self, task: str, context: Mapping[str, Any]) -> str:
        self._logger.info(f"Drafting plan for task: '{task}'")
        prompt = (
            f"Task: {task}\n\n"
            f"Context: {json.dumps(dict(context), indent=2, ensure_ascii=False, default=str)}"
        )
        return self._llm.execute_with_system_message(
            prompt,
            PLAN_SYSTEM_PROMPT,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
