"""
Management of the language model objects used by the application.

The ModelManager class owns the chat model, the embeddings model and
the text splitter, created together from the configuration settings
when `initialize` is called. Until then, requests for these objects
raise a ModelManagerNotInitializedError.

The creation of the objects is local; the first remote call takes
place when the objects are used, for example in `test_connection`.

Example:
    ```python
    from lcs.config import Settings
    from lcs.language_models.model_manager import ModelManager

    manager = ModelManager(Settings())
    manager.initialize()
    if manager.test_connection():
        model = manager.get_chat_model()
        chunks = manager.split_text(document)
    ```
"""

from pydantic import BaseModel, ConfigDict

from langchain_core.embeddings import Embeddings
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_text_splitters import TextSplitter

from lcs.config.config import Settings
from lcs.utils.logging import LoggerBase, get_logger
from .errors import InvalidResponseError, ModelManagerNotInitializedError
from .langchain.models import (
    create_chat_model,
    create_embeddings,
    create_text_splitter,
)

CONNECTION_PROBE = "Hello, this is a connection test."


class ModelHandles(BaseModel):
    """The objects created by ModelManager.initialize"""

    chat_model: BaseChatModel
    embeddings: Embeddings
    text_splitter: TextSplitter

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ModelManager:
    """
    Creates and holds the chat model, the embeddings model and the
    text splitter specified by the settings.

    The manager is either uninitialized, or holds all three objects.
    The objects are not modified after creation, except by an explicit
    call to `reinitialize`, which must not run concurrently with the
    use of the objects.
    """

    def __init__(
        self, settings: Settings, logger: LoggerBase | None = None
    ) -> None:
        self._settings = settings
        self._logger = logger or get_logger(__name__)
        self._handles: ModelHandles | None = None

    def initialize(self) -> None:
        """
        Create the chat model, the embeddings model and the text
        splitter. Calling this function on an initialized manager has
        no effect.

        Raises:
            ConfigurationError: if an API key is missing
            ValidationError, ValueError: if the objects cannot be
                created from the settings
        """
        if self._handles is not None:
            self._logger.warning("ModelManager already initialized")
            return

        try:
            handles = ModelHandles(
                chat_model=create_chat_model(
                    self._settings.chat, self._settings.openai_api_key
                ),
                embeddings=create_embeddings(
                    self._settings.embeddings,
                    self._settings.openai_api_key,
                ),
                text_splitter=create_text_splitter(
                    self._settings.embeddings
                ),
            )
        except Exception as e:
            self._logger.error(f"Failed to initialize ModelManager: {e}")
            raise

        self._handles = handles
        self._logger.info(
            f"ModelManager initialized (chat: {self._settings.chat.model}"
            f", embeddings: {self._settings.embeddings.model})"
        )

    def reinitialize(self) -> None:
        """Discard the current objects and create new ones.

        Raises:
            the errors of initialize()
        """
        self._handles = None
        self.initialize()

    def test_connection(self) -> bool:
        """
        Send a probe message to the chat model.

        Returns:
            True if the model replied with some content, False
            otherwise. Errors are logged and never raised.
        """
        try:
            self._logger.info("Testing model connection...")
            model = self._ready(
                "ModelManager must be initialized before testing connection"
            ).chat_model
            self._check_response(model.invoke(CONNECTION_PROBE))
        except Exception as e:
            self._logger.error(f"Model connection test failed: {e}")
            return False
        self._logger.info("Model connection test successful")
        return True

    async def atest_connection(self) -> bool:
        """Asynchronous version of test_connection."""
        try:
            self._logger.info("Testing model connection...")
            model = self._ready(
                "ModelManager must be initialized before testing connection"
            ).chat_model
            self._check_response(await model.ainvoke(CONNECTION_PROBE))
        except Exception as e:
            self._logger.error(f"Model connection test failed: {e}")
            return False
        self._logger.info("Model connection test successful")
        return True

    def get_config(self) -> Settings:
        return self._settings

    def is_initialized(self) -> bool:
        return self._handles is not None

    def get_chat_model(self) -> BaseChatModel:
        """Returns the chat model.

        Raises:
            ModelManagerNotInitializedError
        """
        model = self._ready().chat_model
        self._logger.debug("Getting chat model instance")
        return model

    def get_embeddings(self) -> Embeddings:
        """Returns the embeddings model.

        Raises:
            ModelManagerNotInitializedError
        """
        embeddings = self._ready().embeddings
        self._logger.debug("Getting embeddings instance")
        return embeddings

    def get_text_splitter(self) -> TextSplitter:
        """Returns the text splitter.

        Raises:
            ModelManagerNotInitializedError
        """
        splitter = self._ready().text_splitter
        self._logger.debug("Getting text splitter instance")
        return splitter

    def split_text(self, text: str) -> list[str]:
        """Split text in chunks of the configured size and overlap."""
        return self.get_text_splitter().split_text(text)

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Compute the embeddings of texts. This is a remote call for
        hosted embedding models."""
        return self.get_embeddings().embed_documents(texts)

    def _ready(
        self, msg: str = "ModelManager must be initialized before use"
    ) -> ModelHandles:
        match self._handles:
            case ModelHandles() as handles:
                return handles
            case _:
                raise ModelManagerNotInitializedError(msg)

    @staticmethod
    def _check_response(response: BaseMessage) -> None:
        if not response.content:
            raise InvalidResponseError("Invalid response from chat model")
