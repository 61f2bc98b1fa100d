"""
Embedding provider backed by OpenAI embeddings through LangChain.

Query embedding happens on the request path, so failures are logged and
turned into None; the knowledge lookup then simply finds nothing.
"""

from typing import List, Optional

from langchain_openai import OpenAIEmbeddings

from utils.logger import get_logger

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


class EmbeddingProvider:
    """Wraps OpenAIEmbeddings for query and batch document embedding."""

    def __init__(self, openai_api_key: str, model: str = DEFAULT_EMBEDDING_MODEL, embeddings=None):
        """
        Args:
            openai_api_key: OpenAI API key
            model: Embedding model name
            embeddings: Pre-built LangChain embeddings object (tests inject a fake)
        """
        self.model = model
        self.embeddings = embeddings or OpenAIEmbeddings(
            model=model,
            openai_api_key=openai_api_key
        )
        self.logger = get_logger("embeddings")

    def embed_query(self, text: str) -> Optional[List[float]]:
        """
        Embed one message.

        Returns:
            Vector, or None when the text is empty or the provider call fails
        """
        if not text or not text.strip():
            return None
        try:
            return self.embeddings.embed_query(text)
        except Exception as e:
            self.logger.error(f"Embedding request failed: {e}", exc_info=True)
            return None

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch for the offline corpus build. Errors propagate."""
        self.logger.info(f"Embedding {len(texts)} documents with {self.model}")
        return self.embeddings.embed_documents(texts)
