"""
Knowledge Module - enriches conversational messages with research insight.

The message is embedded, the knowledge banks are searched, and the best
entry above the similarity threshold becomes a context block for the
coach reply. Any miss (no corpus, embedding failure, low score) leaves the
context empty.
"""

from typing import Dict, List, Optional

from core.config import resolve_path
from core.knowledge_base import load_corpus
from core.retriever import build_retriever
from modules.base import BaseModule
from modules.models import KnowledgeEntry, RetrievalResult


def format_insight(result: Optional[RetrievalResult]) -> str:
    """Context block appended to the coach prompt; empty on a miss."""
    if result is None:
        return ""
    entry = result.entry
    return (
        "\n\nRelevant research insight:\n"
        f"Topic: {entry.topic}\n"
        f"Source: {entry.source}\n"
        f"Summary: {entry.summary}\n"
        f"Action: {entry.action}"
    )


class KnowledgeModule(BaseModule):
    """Semantic lookup over the curated knowledge banks"""

    def __init__(self, *args, corpus: Optional[List[KnowledgeEntry]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        retrieval = self.settings.get("retrieval") or {}
        self.retriever = build_retriever(self.settings)

        if corpus is None:
            paths = [resolve_path(p) for p in retrieval.get("knowledge_paths", [])]
            corpus = load_corpus(paths, retrieval.get("dimension"))
        self.corpus = corpus
        self.logger.info(f"Knowledge corpus ready: {len(self.corpus)} entries")

    def get_name(self) -> str:
        return "knowledge"

    def setup_database(self):
        """Knowledge banks are files; nothing to index"""
        pass

    def find_insight(self, message: str) -> Optional[RetrievalResult]:
        if not self.corpus:
            return None
        if self.embedding_provider is None:
            self.logger.warning("No embedding provider configured; skipping knowledge lookup")
            return None

        query = self.embedding_provider.embed_query(message)
        if query is None:
            return None
        return self.retriever.retrieve(query, self.corpus)

    def enrich(self, message: str) -> str:
        """Knowledge context block for a coach reply; empty on a miss."""
        return format_insight(self.find_insight(message))

    def handle_message(self, message: str, user_id: str) -> Optional[Dict]:
        """
        Returns:
            {"result", "knowledge_context"} on a match, None otherwise
        """
        result = self.find_insight(message)
        if result is None:
            return None
        return {"result": result, "knowledge_context": format_insight(result)}
