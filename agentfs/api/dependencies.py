"""
FastAPI dependency functions for retrieving use cases from the container.
"""

from agentfs.container import container
from agentfs.use_cases.files.mutation_engine import MutationEngine
from agentfs.use_cases.planning.plan_runner import PlanRunner


def get_mutation_engine() -> MutationEngine:
    """
    Get the mutation engine from the container.

    Returns:
        MutationEngine: The workspace mutation engine
    """
    return container.get_mutation_engine()


def get_plan_runner() -> PlanRunner:
    """
    Get the plan runner from the container.

    Returns:
        PlanRunner: The plan runner instance

    Raises:
        ConfigurationError: If the LLM adapter cannot be configured
    """
    return container.get_plan_runner()
