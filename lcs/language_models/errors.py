"""
Exceptions raised by the model access layer and by the agent loop.
Errors raised by the LangChain integration objects and by the remote
services propagate unchanged.
"""


class ConfigurationError(ValueError):
    """The settings do not allow building the requested object, for
    example because an API key is missing."""


class ModelManagerNotInitializedError(RuntimeError):
    """A model handle was requested before ModelManager.initialize()
    completed successfully."""


class InvalidResponseError(ValueError):
    """The model returned a response without content."""


class AgentIterationLimitError(RuntimeError):
    """The model kept requesting tools beyond the configured number of
    agent steps."""

    def __init__(self, max_iterations: int) -> None:
        super().__init__(
            f"Agent stopped after {max_iterations} model calls "
            "without producing a final answer"
        )
        self.max_iterations = max_iterations


class ToolNotFoundError(KeyError):
    """The model requested a tool that was not bound to it."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            f"Tool '{name}' not available. Available tools: {available}"
        )
        self.name = name
        self.available = available
