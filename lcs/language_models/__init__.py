# pyright: reportUnusedImport=false
# flake8: noqa

from .errors import (
    ConfigurationError,
    ModelManagerNotInitializedError,
    InvalidResponseError,
    AgentIterationLimitError,
    ToolNotFoundError,
)
from .model_manager import ModelManager
from .agent import (
    ToolCallingAgent,
    MemoryCheckpointer,
    create_search_agent,
    final_answer,
)
