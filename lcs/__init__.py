"""
lcs: a starter template wiring a hosted chat model, an embeddings
model, a text splitter and a tool-calling agent loop, based on the
LangChain API.
"""

__version__ = "0.1.0"
