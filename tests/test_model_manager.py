"""Test the model manager"""

import unittest
from typing import Any
from unittest import mock

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.outputs import ChatResult
from langchain_text_splitters import TextSplitter

from lcs.config.config import Settings
from lcs.language_models.errors import (
    ConfigurationError,
    ModelManagerNotInitializedError,
)
from lcs.language_models.langchain.models import DebugChatModel
from lcs.language_models.message_iterator import yield_message
from lcs.language_models.model_manager import ModelManager
from lcs.utils.logging import LoglistLogger


def debug_settings(**kwargs: Any) -> Settings:
    chat = kwargs.pop('chat', {'model': "Debug/debug"})
    return Settings(
        chat=chat,
        embeddings={
            'model': "Debug/debug",
            'chunk_size': 50,
            'chunk_overlap': 10,
        },
        **kwargs,
    )


class FailingChatModel(DebugChatModel):
    """A chat model whose service cannot be reached"""

    def _generate(self, *args: Any, **kwargs: Any) -> ChatResult:
        raise ConnectionError("service unreachable")


class TestUninitialized(unittest.TestCase):

    def setUp(self):
        self.logger = LoglistLogger()
        self.manager = ModelManager(debug_settings(), self.logger)

    def test_not_initialized(self):
        self.assertFalse(self.manager.is_initialized())

    def test_accessors_fail(self):
        with self.assertRaises(ModelManagerNotInitializedError):
            self.manager.get_chat_model()
        with self.assertRaises(ModelManagerNotInitializedError):
            self.manager.get_embeddings()
        with self.assertRaises(ModelManagerNotInitializedError):
            self.manager.get_text_splitter()
        with self.assertRaises(ModelManagerNotInitializedError):
            self.manager.split_text("some text")

    def test_get_config(self):
        settings = debug_settings()
        manager = ModelManager(settings)
        self.assertIs(manager.get_config(), settings)

    def test_connection_uninitialized(self):
        self.assertFalse(self.manager.test_connection())
        logs = self.logger.get_logs(3)
        self.assertEqual(len(logs), 1)
        self.assertIn("must be initialized", logs[0])


class TestInitialize(unittest.TestCase):

    def setUp(self):
        self.logger = LoglistLogger()
        self.manager = ModelManager(debug_settings(), self.logger)
        self.manager.initialize()

    def test_initialized(self):
        self.assertTrue(self.manager.is_initialized())
        self.assertIsInstance(self.manager.get_chat_model(), BaseChatModel)
        self.assertIsInstance(self.manager.get_embeddings(), Embeddings)
        self.assertIsInstance(
            self.manager.get_text_splitter(), TextSplitter
        )

    def test_accessors_log_debug(self):
        self.logger.clear_logs()
        self.manager.get_chat_model()
        self.assertEqual(
            self.logger.get_logs(), ["DEBUG - Getting chat model instance"]
        )

    def test_initialize_twice(self):
        chat = self.manager.get_chat_model()
        embeddings = self.manager.get_embeddings()
        splitter = self.manager.get_text_splitter()
        self.logger.clear_logs()

        with mock.patch(
            "lcs.language_models.model_manager.create_chat_model"
        ) as factory:
            self.manager.initialize()
            factory.assert_not_called()

        self.assertIs(self.manager.get_chat_model(), chat)
        self.assertIs(self.manager.get_embeddings(), embeddings)
        self.assertIs(self.manager.get_text_splitter(), splitter)
        self.assertIn(
            "WARNING - ModelManager already initialized",
            self.logger.get_logs(),
        )

    def test_reinitialize(self):
        chat = self.manager.get_chat_model()
        embeddings = self.manager.get_embeddings()
        splitter = self.manager.get_text_splitter()

        self.manager.reinitialize()

        self.assertTrue(self.manager.is_initialized())
        self.assertIsNot(self.manager.get_chat_model(), chat)
        self.assertIsNot(self.manager.get_embeddings(), embeddings)
        self.assertIsNot(self.manager.get_text_splitter(), splitter)

    def test_reinitialize_failure(self):
        with mock.patch(
            "lcs.language_models.model_manager.create_chat_model",
            side_effect=ConnectionError("service unreachable"),
        ):
            with self.assertRaises(ConnectionError):
                self.manager.reinitialize()
        self.assertFalse(self.manager.is_initialized())
        with self.assertRaises(ModelManagerNotInitializedError):
            self.manager.get_chat_model()

    def test_split_text(self):
        chunks = self.manager.split_text("word " * 40)
        self.assertGreater(len(chunks), 1)
        for chunk in chunks:
            self.assertLessEqual(len(chunk), 50)

    def test_embed_documents(self):
        vectors = self.manager.embed_documents(["a", "b", "c"])
        self.assertEqual(len(vectors), 3)


class TestInitializeFailure(unittest.TestCase):

    def test_missing_key(self):
        logger = LoglistLogger()
        manager = ModelManager(
            debug_settings(
                chat={'model': "OpenAI/gpt-4o-mini"},
                openai_api_key="  ",
            ),
            logger,
        )
        with self.assertRaises(ConfigurationError):
            manager.initialize()
        self.assertFalse(manager.is_initialized())
        errors = logger.get_logs(3)
        self.assertEqual(len(errors), 1)
        self.assertTrue(
            errors[0].startswith(
                "ERROR - Failed to initialize ModelManager"
            )
        )

    def test_openai_with_key(self):
        manager = ModelManager(
            debug_settings(
                chat={'model': "OpenAI/gpt-4o-mini"},
                openai_api_key="sk-test",
            ),
            LoglistLogger(),
        )
        manager.initialize()
        self.assertEqual(manager.get_chat_model().get_name(), "ChatOpenAI")


class TestConnection(unittest.TestCase):

    def test_success(self):
        logger = LoglistLogger()
        manager = ModelManager(debug_settings(), logger)
        manager.initialize()
        self.assertTrue(manager.test_connection())
        self.assertIn(
            "INFO - Model connection test successful", logger.get_logs()
        )

    def test_empty_response(self):
        manager = ModelManager(
            debug_settings(
                chat={
                    'model': "Debug/debug",
                    'provider_params': {'message': ""},
                }
            ),
            LoglistLogger(),
        )
        manager.initialize()
        self.assertFalse(manager.test_connection())

    def test_remote_failure(self):
        logger = LoglistLogger()
        manager = ModelManager(debug_settings(), logger)
        with mock.patch(
            "lcs.language_models.model_manager.create_chat_model",
            return_value=FailingChatModel(messages=yield_message()),
        ):
            manager.initialize()
        self.assertTrue(manager.is_initialized())
        self.assertFalse(manager.test_connection())
        self.assertIn("service unreachable", logger.get_logs(3)[0])


class TestAsyncConnection(unittest.IsolatedAsyncioTestCase):

    async def test_success(self):
        manager = ModelManager(debug_settings(), LoglistLogger())
        manager.initialize()
        self.assertTrue(await manager.atest_connection())

    async def test_uninitialized(self):
        manager = ModelManager(debug_settings(), LoglistLogger())
        self.assertFalse(await manager.atest_connection())


if __name__ == "__main__":
    unittest.main()
