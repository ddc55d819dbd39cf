""" LangChain API interface to language models and tools

This package connects the configuration settings, read from the
environment or from config.toml, to the LangChain objects that call
the hosted services:

- model objects: the chat model, the embeddings model and the text
    splitter (models.py).
- tool objects: the web search tool that may be bound to the chat
    model (tools.py).
"""
