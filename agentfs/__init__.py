"""agentfs package: a sandboxed workspace mutation engine with undo/redo and a plan runner.

Subpackages are imported directly; keep __all__ empty so importing the package
stays free of side effects.
"""

__all__: list[str] = []
