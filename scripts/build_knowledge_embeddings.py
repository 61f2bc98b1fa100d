#!/usr/bin/env python3
"""
Batch embedding script for the knowledge banks.

Reads a curated dataset (topic/source/summary/action records), embeds each
record with OpenAI embeddings and writes the corpus file the knowledge
module loads at startup.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from core.config import load_config
from core.embeddings import DEFAULT_EMBEDDING_MODEL, EmbeddingProvider
from core.env_loader import get_env, load_env
from core.knowledge_base import MalformedCorpusError, build_corpus, save_corpus
from utils.logger import get_logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Embed a knowledge dataset into a corpus file")
    parser.add_argument("dataset", help="Dataset JSON (list of topic/source/summary/action records)")
    parser.add_argument("output", help="Corpus JSON to write")
    parser.add_argument("--model", default=None, help="Embedding model (default: EMBEDDING_MODEL or text-embedding-3-small)")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the corpus build."""
    load_env()
    logger = get_logger("build_embeddings")
    args = parse_args(argv)

    openai_api_key = get_env("OPENAI_API_KEY")
    if not openai_api_key:
        logger.error("OPENAI_API_KEY environment variable not set")
        sys.exit(1)

    with open(args.dataset, "r", encoding="utf-8") as f:
        dataset = json.load(f)

    model = args.model or get_env("EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL)
    provider = EmbeddingProvider(openai_api_key, model=model)

    try:
        entries = build_corpus(dataset, provider)
    except MalformedCorpusError as e:
        logger.error(f"Dataset rejected: {e}")
        sys.exit(1)

    expected = load_config()["retrieval"].get("dimension")
    if entries and expected and entries[0].dimension != expected:
        logger.warning(
            f"Model produced dimension {entries[0].dimension}; config expects {expected}"
        )

    save_corpus(entries, args.output)
    logger.info(f"Embeddings generated for {len(entries)} records")


if __name__ == "__main__":
    main()
