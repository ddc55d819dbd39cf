# pyright: reportUnusedImport=false
# flake8: noqa

from .config import (
    Settings,
    LanguageModelSettings,
    EmbeddingSettings,
    SearchSettings,
    AgentSettings,
    serialize_settings,
    export_settings,
    load_settings,
)
