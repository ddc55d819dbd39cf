"""
Tools that may be bound to the chat model of the agent.

At present, the only tool is a hosted web search (Tavily). Tool
objects are memoized in the `search_tools` dictionary, keyed by the
search configuration, so that agents created with the same settings
share the same tool object.

Example:
    ```python
    from lcs.config import Settings
    from lcs.language_models.langchain.tools import create_search_tool

    settings = Settings()
    search = create_search_tool(settings)
    result = search.invoke({'query': "weather in Khulna"})
    ```
"""

from pydantic import BaseModel, ConfigDict, SecretStr

from langchain_core.tools import BaseTool

from lcs.config.config import Settings, SearchSettings, SearchTopic
from ..errors import ConfigurationError
from ..lazy_dict import LazyLoadingDict


class SearchToolSpec(BaseModel):
    """Search tool definition"""

    api_key: SecretStr
    max_results: int
    topic: SearchTopic

    model_config = ConfigDict(frozen=True, extra='forbid')


def _create_search_tool(spec: SearchToolSpec) -> BaseTool:
    try:
        from langchain_tavily import TavilySearch
    except ImportError as e:
        raise ImportError(
            "Web search requires the 'langchain-tavily' package. "
            "Install it with: pip install langchain-tavily"
        ) from e

    return TavilySearch(
        max_results=spec.max_results,
        topic=spec.topic,
        tavily_api_key=spec.api_key.get_secret_value(),
    )


# global project-wide repository of search tools
search_tools: LazyLoadingDict[SearchToolSpec, BaseTool] = LazyLoadingDict(
    _create_search_tool
)


def create_search_tool(
    settings: Settings | None = None,
    search: SearchSettings | None = None,
) -> BaseTool:
    """
    Returns the web search tool configured by the settings.

    Args:
        settings: the application settings, providing the API key
            and the search settings. If None, read from the
            environment and config.toml.
        search: optional search settings overriding those of
            settings.

    Returns:
        a Langchain tool taking a query string.

    Raises:
        ConfigurationError: if the Tavily API key is missing
        ImportError: for not installed libraries
    """
    if settings is None:
        settings = Settings()
    if search is None:
        search = settings.search

    api_key = settings.tavily_api_key
    if api_key is None or not api_key.get_secret_value().strip():
        raise ConfigurationError(
            "Web search requires an API key. Set the TAVILY_API_KEY "
            "environment variable."
        )

    return search_tools[
        SearchToolSpec(
            api_key=api_key,
            max_results=search.max_results,
            topic=search.topic,
        )
    ]
