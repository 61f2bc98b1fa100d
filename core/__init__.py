"""
Core infrastructure for the Arlo coaching backend.

This package contains shared services:
- Configuration and environment loading
- Database management
- OpenAI chat client and embedding provider
- Knowledge corpus loading and semantic retrieval
- Weekly report job and scheduler
"""

from .config import load_config
from .database import init_database
from .knowledge_base import MalformedCorpusError, load_corpus
from .openai_client import OpenAIClient
from .retriever import LinearScanRetriever, Retriever, ShardedRetriever, retrieve
from .scheduler import Scheduler
from .weekly_report import WeeklyReportJob


def get_embedding_provider():
    """
    Lazy import for the embedding provider.
    Keeps LangChain out of the import path unless embeddings are needed.
    """
    from .embeddings import EmbeddingProvider
    return EmbeddingProvider


__all__ = [
    "load_config",
    "init_database",
    "MalformedCorpusError",
    "load_corpus",
    "OpenAIClient",
    "Retriever",
    "LinearScanRetriever",
    "ShardedRetriever",
    "retrieve",
    "Scheduler",
    "WeeklyReportJob",
    "get_embedding_provider",
]
