"""
Demonstration of the search agent: two conversation turns asking
about the weather, the second continuing the conversation of the
first. The answers are printed to stdout.

Usage:
    ```bash
    export OPENAI_API_KEY=sk-...
    export TAVILY_API_KEY=tvly-...
    python -m lcs
    ```

To run the demonstration offline, use the debug models:
    ```bash
    LCS_CHAT__MODEL=Debug/debug LCS_EMBEDDINGS__MODEL=Debug/debug \\
        TAVILY_API_KEY=unused python -m lcs
    ```
"""

import logging
import sys

from langchain_core.messages import BaseMessage, HumanMessage

from lcs.config.config import Settings, format_pydantic_error_message
from lcs.utils.logging import LoggerBase, get_logger, set_log_level
from lcs.language_models.model_manager import ModelManager
from lcs.language_models.agent import create_search_agent, final_answer

DEMO_QUESTIONS = (
    "What is the weather in Khulna?",
    "What about Dhaka?",
)


def run_demo(
    settings: Settings, logger: LoggerBase
) -> list[BaseMessage]:
    """Runs the demonstration turns and returns the conversation."""
    manager = ModelManager(settings, logger)
    manager.initialize()
    agent = create_search_agent(manager, logger=logger)

    messages: list[BaseMessage] = []
    for question in DEMO_QUESTIONS:
        messages = agent.invoke(messages + [HumanMessage(question)])
        print("Response:", final_answer(messages))
    return messages


def main(settings: Settings | None = None) -> int:
    """Entry point of the demonstration. Returns the exit status."""
    logger = get_logger("lcs")
    try:
        if settings is None:
            settings = Settings()
        set_log_level(settings.log_level)
        logger.set_level(
            logging.getLevelNamesMapping()[settings.log_level]
        )
        run_demo(settings, logger)
    except Exception as e:
        logger.error(
            "Failed to run the agent demonstration: "
            + format_pydantic_error_message(str(e))
        )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
