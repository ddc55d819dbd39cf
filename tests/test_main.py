"""Test the demonstration entry point"""

import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from langchain_core.messages import AIMessage, HumanMessage
from langchain_core.tools import tool

from lcs.config.config import Settings
from lcs.main import DEMO_QUESTIONS, main, run_demo
from lcs.utils.logging import LoglistLogger


@tool
def search(query: str) -> str:
    """Search the web for the query."""
    return "sunny"


def debug_settings() -> Settings:
    return Settings(
        chat={'model': "Debug/debug"},
        embeddings={'model': "Debug/debug"},
        tavily_api_key="tvly-test",
    )


@mock.patch(
    "lcs.language_models.agent.create_search_tool", return_value=search
)
class TestDemo(unittest.TestCase):

    def test_run_demo(self, _factory):
        out = io.StringIO()
        with redirect_stdout(out):
            messages = run_demo(debug_settings(), LoglistLogger())

        self.assertEqual(len(messages), 4)
        self.assertIsInstance(messages[0], HumanMessage)
        self.assertEqual(messages[0].content, DEMO_QUESTIONS[0])
        self.assertIsInstance(messages[1], AIMessage)
        self.assertEqual(messages[2].content, DEMO_QUESTIONS[1])
        self.assertEqual(
            out.getvalue().splitlines(),
            ["Response: Message 1", "Response: Message 2"],
        )

    def test_main_success(self, _factory):
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main(debug_settings()), 0)

    def test_main_failure(self, _factory):
        settings = Settings(
            chat={'model': "OpenAI/gpt-4o-mini"},
            embeddings={'model': "Debug/debug"},
            openai_api_key=" ",
        )
        with redirect_stdout(io.StringIO()):
            self.assertEqual(main(settings), 1)


if __name__ == "__main__":
    unittest.main()
