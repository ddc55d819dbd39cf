"""
This module implements creation of the Langchain objects used by the
application: the chat model, the embeddings model, and the text
splitter that chunks documents before they are embedded.

The objects are created from the configuration settings, so that the
model provider, the model, and its parameters may be changed in the
environment or in config.toml without modifying the code.

The factory functions do not memoize the objects they create. Every
call produces a new object; the ModelManager class in
lcs.language_models.model_manager holds the objects used by the
application.

Note: the abstract class in the LangChain API that defines the model
object is `BaseChatModel`.

Examples:

```python
from lcs.config import Settings
from lcs.language_models.langchain.models import (
    create_chat_model,
    create_embeddings,
    create_text_splitter,
)

settings = Settings()
model = create_chat_model(settings.chat, settings.openai_api_key)
response = model.invoke("Why is the sky blue?")

splitter = create_text_splitter(settings.embeddings)
chunks = splitter.split_text(long_text)
```

Note:
    Support for new model sources should be added here by extending
    the match ... case statements, and in lcs.config.config.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import SecretStr

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import LanguageModelInput
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.language_models.fake_chat_models import (
    GenericFakeChatModel,
)
from langchain_core.messages import BaseMessage
from langchain_core.runnables import Runnable
from langchain_text_splitters import (
    RecursiveCharacterTextSplitter,
    TextSplitter,
)

from lcs.config.config import (
    LanguageModelSettings,
    EmbeddingSettings,
    ModelSource,
    EmbeddingSource,
)
from ..errors import ConfigurationError
from ..message_iterator import yield_message, yield_constant_message

# Size of the vectors produced by the debug embeddings
DEBUG_EMBEDDING_SIZE = 256


class DebugChatModel(GenericFakeChatModel):
    """An offline chat model returning messages from an iterator.
    Binding tools is accepted, but the model never requests them
    unless the iterator yields messages with tool calls."""

    def bind_tools(
        self,
        tools: Sequence[Any],
        *,
        tool_choice: str | None = None,
        **kwargs: Any,
    ) -> Runnable[LanguageModelInput, BaseMessage]:
        return self


def _require_key(api_key: SecretStr | None, source: str) -> SecretStr:
    if api_key is None or not api_key.get_secret_value().strip():
        raise ConfigurationError(
            f"{source} models require an API key. Set the "
            f"{source.upper()}_API_KEY environment variable."
        )
    return api_key


def create_chat_model(
    model: LanguageModelSettings,
    api_key: SecretStr | None = None,
) -> BaseChatModel:
    """
    Factory function to create a Langchain chat model while checking
    permissible sources.

    Args:
        model: the chat model settings
        api_key: the API key of the provider. Not required by the
            Debug source.

    Returns:
        a Langchain chat model object.

    Raises:
        ConfigurationError: if the API key is missing
        ImportError: for not installed libraries
    """
    model_source: ModelSource = model.get_model_source()
    model_name: str = model.get_model_name()
    match model_source:
        case "OpenAI":
            try:
                from langchain_openai.chat_models import ChatOpenAI
            except ImportError as e:
                raise ImportError(
                    "OpenAI models require the 'langchain-openai'"
                    " package. Install it with: pip install "
                    "langchain-openai"
                ) from e

            kwargs: dict[str, Any] = {
                "model": model_name,
                "api_key": _require_key(api_key, model_source),
                "temperature": model.temperature,
                "max_retries": model.max_retries,
                "use_responses_api": False,
            }
            if model.max_tokens is not None:
                kwargs["max_tokens"] = model.max_tokens
            if model.timeout is not None:
                kwargs["timeout"] = model.timeout

            kwargs.update(model.provider_params)

            return ChatOpenAI(**kwargs)

        case "Debug":
            if "message" in model.provider_params:
                return DebugChatModel(
                    name="Langchain fake messages",
                    messages=yield_constant_message(
                        str(model.provider_params["message"])
                    ),
                )
            return DebugChatModel(
                name="Langchain fake chat",
                messages=yield_message(),
            )

        case _:
            raise ValueError(
                f"Unreachable code reached: invalid source {model_source}"
            )


def create_embeddings(
    model: EmbeddingSettings,
    api_key: SecretStr | None = None,
) -> Embeddings:
    """
    Factory function to create a Langchain embeddings model while
    checking permissible sources.

    Args:
        model: the embeddings settings
        api_key: the API key of the provider. Not required by the
            Debug source.

    Returns:
        a Langchain object that embeds text by calling
            embed_documents or embed_query.

    Raises:
        ConfigurationError: if the API key is missing
        ImportError: for not installed libraries
    """
    model_source: EmbeddingSource = model.get_model_source()
    model_name: str = model.get_model_name()
    match model_source:
        case "OpenAI":
            try:
                from langchain_openai import OpenAIEmbeddings
            except ImportError as e:
                raise ImportError(
                    "OpenAI models require the 'langchain-openai'"
                    " package. Install it with: pip install "
                    "langchain-openai"
                ) from e

            return OpenAIEmbeddings(
                model=model_name,
                api_key=_require_key(api_key, model_source),
            )

        case "Debug":
            from langchain_core.embeddings import (
                DeterministicFakeEmbedding,
            )

            return DeterministicFakeEmbedding(size=DEBUG_EMBEDDING_SIZE)

        case _:
            raise ValueError(
                f"Unreachable code reached: invalid source {model_source}"
            )


def create_text_splitter(settings: EmbeddingSettings) -> TextSplitter:
    """
    Create the text splitter that chunks documents prior to
    embedding.

    Args:
        settings: the embeddings settings, providing chunk_size and
            chunk_overlap

    Returns:
        a Langchain text splitter
    """
    return RecursiveCharacterTextSplitter(
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        add_start_index=False,
    )
