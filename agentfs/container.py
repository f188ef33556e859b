"""
Dependency injection container for managing application dependencies.
"""

import logging

from agentfs.adapters.files.local_fs_adapter import LocalFileSystemAdapter
from agentfs.adapters.llm.openai_adapter import OpenAIAdapter
from agentfs.adapters.planning.llm_plan_author import LLMPlanAuthor
from agentfs.adapters.planning.llm_step_interpreter import LLMStepInterpreter
from agentfs.commands import CommandDispatcher
from agentfs.config.settings import Settings, settings
from agentfs.ports.files.file_repository_port import FileRepositoryPort
from agentfs.ports.llm.llm_port import LLMPort
from agentfs.ports.planning.plan_author_port import PlanAuthorPort
from agentfs.ports.planning.step_interpreter_port import StepInterpreterPort
from agentfs.use_cases.files.mutation_engine import MutationEngine
from agentfs.use_cases.planning.plan_runner import PlanRunner


class DependencyContainer:
    """
    Container for managing application dependencies using dependency injection.

    LLM-backed components are built on first use, so file operations work
    without an API key.
    """

    def __init__(self, app_settings: Settings | None = None):
        self._instances = {}
        self._settings = app_settings or settings
        self._logger = logging.getLogger(__name__)

    def get_file_repository(self) -> FileRepositoryPort:
        """
        Get file repository adapter instance.

        Returns:
            FileRepositoryPort implementation
        """
        if "file_repository" not in self._instances:
            self._instances["file_repository"] = LocalFileSystemAdapter(self._logger)
        return self._instances["file_repository"]

    def get_mutation_engine(self) -> MutationEngine:
        """
        Get the workspace mutation engine configured from settings.

        Returns:
            Configured MutationEngine
        """
        if "mutation_engine" not in self._instances:
            s = self._settings
            self._instances["mutation_engine"] = MutationEngine(
                self.get_file_repository(),
                workspace_root=s.workspace_root,
                allow_outside_workspace=s.allow_outside_workspace,
                max_undo_history=s.max_undo_history,
                ignore_file=s.ignore_file,
                show_diff_preview=s.show_diff,
                logger=self._logger,
            )
        return self._instances["mutation_engine"]

    def get_llm_adapter(self) -> LLMPort:
        """
        Get LLM adapter instance.

        Returns:
            LLMPort implementation

        Raises:
            ConfigurationError: If OPENAI_API_KEY is not set
        """
        if "llm_adapter" not in self._instances:
            self._instances["llm_adapter"] = OpenAIAdapter(logger=self._logger)
        return self._instances["llm_adapter"]

    def get_step_interpreter(self) -> StepInterpreterPort:
        if "step_interpreter" not in self._instances:
            self._instances["step_interpreter"] = LLMStepInterpreter(
                self.get_llm_adapter(), logger=self._logger
            )
        return self._instances["step_interpreter"]

    def get_plan_author(self) -> PlanAuthorPort:
        if "plan_author" not in self._instances:
            self._instances["plan_author"] = LLMPlanAuthor(
                self.get_llm_adapter(), logger=self._logger
            )
        return self._instances["plan_author"]

    def get_plan_runner(self) -> PlanRunner:
        """
        Get the plan runner with injected engine, interpreter and author.

        Returns:
            Configured PlanRunner
        """
        if "plan_runner" not in self._instances:
            self._instances["plan_runner"] = PlanRunner(
                self.get_mutation_engine(),
                self.get_step_interpreter(),
                self.get_plan_author(),
                logger=self._logger,
            )
        return self._instances["plan_runner"]

    def get_command_dispatcher(self) -> CommandDispatcher:
        if "command_dispatcher" not in self._instances:
            self._instances["command_dispatcher"] = CommandDispatcher(
                self.get_mutation_engine(),
                self.get_plan_runner,
                logger=self._logger,
            )
        return self._instances["command_dispatcher"]

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._instances.clear()


# Global container instance
container = DependencyContainer()
