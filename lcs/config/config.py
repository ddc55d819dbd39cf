"""
Read and write configuration settings.

This file also contains the definitions of the model sources supported
in the package. Settings are read from, in order of priority, the
arguments given to the constructor, the environment (prefix LCS_,
nested fields separated by a double underscore), a .env file, and a
config.toml file in the working folder. The API keys are read from the
conventional OPENAI_API_KEY and TAVILY_API_KEY environment variables.

Example:
    ```bash
    export OPENAI_API_KEY=sk-...
    export LCS_CHAT__MODEL=OpenAI/gpt-4o
    export LCS_EMBEDDINGS__CHUNK_SIZE=500
    ```
"""

from pathlib import Path
from typing import Any, Literal, Self

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

# Define supported models. These models must also be defined in the
# factory functions of lcs.language_models.langchain.models
ModelSource = Literal['OpenAI', 'Debug']
EmbeddingSource = Literal['OpenAI', 'Debug']
SearchTopic = Literal['general', 'news', 'finance']
LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

DEFAULT_CONFIG_FILE = "config.toml"
ENV_PREFIX = "LCS_"


def _validate_spec(spec: str, sources: tuple[str, ...]) -> str:
    cleaned_spec = spec.strip()
    if not (bool(cleaned_spec)):
        raise ValueError("Model specification is empty")
    if '\n' in cleaned_spec or '\r' in cleaned_spec:
        raise ValueError(
            "Model specification cannot contain newlines or carriage"
            + " returns."
        )
    tokens = cleaned_spec.split('/')
    if len(tokens) != 2 or not tokens[1].strip():
        raise ValueError(
            "Model specification must contain the model provider and "
            + "the model name separated by a single '/'."
        )
    model_spec = tokens[0].strip()
    if model_spec not in sources:
        raise ValueError(
            f"Invalid model provider: '{model_spec}'. "
            + f"Must be one of {sources}."
        )
    return model_spec + '/' + tokens[1].strip()


class LanguageModelSettings(BaseModel):
    """
    Specification of the chat model.

    Attributes:
        model: model specification, 'source/name'
        temperature: float between 0.0 and 2.0
        max_tokens: max number of generated tokens
        max_retries: max number of retry attempts of the client
        timeout: timeout when waiting for response
        provider_params: provider-specific parameters
    """

    model: str = Field(
        default="OpenAI/gpt-4o-mini",
        description="Model specification in the form "
        + "'model_provider/model' (e.g., 'OpenAI/gpt-4o')",
    )
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=2.0,
        description="Controls randomness in model responses (0.0-2.0)",
    )
    max_tokens: int | None = Field(
        default=1000,
        ge=1,
        description="Maximum number of tokens to generate",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Maximum number of retry attempts",
    )
    timeout: float | None = Field(
        default=None, gt=0, description="Request timeout in seconds"
    )
    provider_params: dict[str, str | int | float | bool] = Field(
        default_factory=dict,
        description="Provider-specific parameters (e.g., top_p for OpenAI)",
    )

    model_config = ConfigDict(frozen=True, extra='forbid')

    def get_model_source(self) -> ModelSource:
        return self.model.split('/')[0]  # type: ignore

    def get_model_name(self) -> str:
        return self.model.split('/')[1]

    @field_validator('model', mode='after')
    @classmethod
    def validate_model_spec(cls, spec: str) -> str:
        return _validate_spec(spec, ModelSource.__args__)

    @model_validator(mode='after')
    def validate_provider_params(self) -> Self:
        """Validate provider-specific parameters based on the source."""
        ALLOWED_PARAMS = {
            'OpenAI': {
                'frequency_penalty',
                'presence_penalty',
                'top_p',
                'seed',
            },
            'Debug': {'message'},
        }

        source: ModelSource = self.get_model_source()
        allowed = ALLOWED_PARAMS[source]
        invalid_params = set(self.provider_params.keys()) - allowed
        if invalid_params:
            raise ValueError(
                f"Invalid provider_params for {source}: "
                f"{invalid_params}. Allowed: {allowed}"
            )
        return self


class EmbeddingSettings(BaseModel):
    """
    Specification of the embeddings model and of the text chunking
    applied to documents before embedding.

    Attributes:
        model: embedding model specification, 'source/name'
        chunk_size: max characters per chunk
        chunk_overlap: characters shared by consecutive chunks
    """

    model: str = Field(
        default="OpenAI/text-embedding-3-small",
        description="Model specification in the form "
        + "'model_provider/model' (e.g., 'OpenAI/text-embedding-3-small')",
    )
    chunk_size: int = Field(
        default=1000, ge=1, description="Characters per split segment"
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Characters shared by consecutive segments",
    )

    model_config = ConfigDict(frozen=True, extra='forbid')

    def get_model_source(self) -> EmbeddingSource:
        return self.model.split('/')[0]  # type: ignore

    def get_model_name(self) -> str:
        return self.model.split('/')[1]

    @field_validator('model', mode='after')
    @classmethod
    def validate_model_spec(cls, spec: str) -> str:
        return _validate_spec(spec, EmbeddingSource.__args__)

    @model_validator(mode='after')
    def validate_overlap(self) -> Self:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller "
                f"than chunk_size ({self.chunk_size})"
            )
        return self


class SearchSettings(BaseModel):
    """Web search tool options."""

    max_results: int = Field(default=3, ge=1, le=20)
    topic: SearchTopic = "general"

    model_config = ConfigDict(frozen=True, extra='forbid')


class AgentSettings(BaseModel):
    """Agent loop options."""

    max_iterations: int = Field(
        default=25,
        ge=1,
        description="Max model calls in one agent turn",
    )

    model_config = ConfigDict(frozen=True, extra='forbid')


class Settings(BaseSettings):
    """
    A pydantic settings object containing the configuration of the
    application. A single instance is created at start-up and passed
    to the components that need it.

    Attributes:
        openai_api_key: key for the chat and embeddings provider
        tavily_api_key: key for the web search tool
        chat: chat model configuration
        embeddings: embedding model and chunking configuration
        search: web search tool configuration
        agent: agent loop configuration
        log_level: verbosity of the diagnostic logger
    """

    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            'openai_api_key', 'OPENAI_API_KEY'
        ),
    )
    tavily_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            'tavily_api_key', 'TAVILY_API_KEY'
        ),
    )
    log_level: LogLevel = "INFO"

    chat: LanguageModelSettings = Field(
        default_factory=LanguageModelSettings,
        description="Chat model used by the agent",
    )
    embeddings: EmbeddingSettings = Field(
        default_factory=EmbeddingSettings,
        description="Embedding model and text splitting",
    )
    search: SearchSettings = Field(default_factory=SearchSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)

    model_config = SettingsConfigDict(
        toml_file=DEFAULT_CONFIG_FILE,
        env_file=".env",
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        frozen=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    def __str__(self) -> str:
        return serialize_settings(self)


def serialize_settings(sets: BaseSettings) -> str:
    """Transform the settings into a string in TOML format. API keys
    are never serialized.

    Args:
        sets: The settings object to serialize

    Returns:
        TOML formatted string representation of settings
    """
    import tomlkit

    doc = tomlkit.document()
    doc.add(tomlkit.comment("Configuration file"))
    doc.add(tomlkit.nl())

    data: dict[str, Any] = sets.model_dump()
    for key, value in data.items():
        if isinstance(value, SecretStr):
            continue
        if isinstance(value, dict):
            tbl = tomlkit.table()
            for kkey, vvalue in value.items():  # type: ignore
                # None can't be serialized to TOML
                if vvalue is not None:
                    tbl[kkey] = vvalue
            doc[key] = tbl
        elif value is not None:
            doc[key] = value

    return str(tomlkit.dumps(doc))  # type: ignore


def export_settings(
    settings: BaseSettings, file_path: str | Path | None = None
) -> None:
    """Save settings to file in TOML format.

    Args:
        settings: A settings object to save
        file_path: The settings file path (defaults to config.toml)

    Raises:
        OSError: If file cannot be written
    """
    if file_path is None:
        file_path = DEFAULT_CONFIG_FILE

    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8") as f:
        f.write(serialize_settings(settings))


def load_settings(file_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML file. The environment still takes
    precedence over the file content.

    Args:
        file_path: Path to settings file (defaults to config.toml)

    Returns:
        Loaded settings object

    Raises:
        FileNotFoundError: If settings file doesn't exist
        ValueError: If settings file is invalid
    """
    if file_path is None:
        file_path = DEFAULT_CONFIG_FILE

    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(
            f"Settings file not found: {file_path}"
        )

    try:

        class FileSettings(Settings):
            model_config = SettingsConfigDict(
                toml_file=str(file_path),
                env_file=".env",
                env_prefix=ENV_PREFIX,
                env_nested_delimiter="__",
                frozen=True,
                extra='ignore',
            )

        return FileSettings()
    except Exception as e:
        raise ValueError(
            f"Failed to load settings from {file_path}: {e}"
        ) from e


def format_pydantic_error_message(error_message: str) -> str:
    """Filter out verbose lines from pydantic error messages.

    Args:
        error_message: Raw pydantic error message

    Returns:
        Cleaned error message without verbose help text
    """
    lines = error_message.split('\n')
    filtered_lines = [
        line
        for line in lines
        if "For further information visit" not in line
    ]
    return '\n'.join(filtered_lines)
