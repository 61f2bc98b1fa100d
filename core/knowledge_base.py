"""
Knowledge corpus loading and building.

A corpus file is a JSON array of records:
    {"topic": str, "source": str, "summary": str, "action": str, "vector": [float, ...]}

Every vector in a corpus build has the same dimension. The loader checks the
schema and the dimension up front; a file that fails is a broken offline
build, so it raises MalformedCorpusError instead of returning partial data.
"""

import json
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from modules.models import KnowledgeEntry
from utils.logger import get_logger

logger = get_logger("knowledge_base")

TEXT_FIELDS = ("topic", "source", "summary", "action")


class MalformedCorpusError(ValueError):
    """A knowledge corpus violates its schema or mixes vector dimensions."""


def entry_from_record(record: Dict, position: int, dimension: Optional[int] = None) -> KnowledgeEntry:
    """
    Validate one persisted record and build a KnowledgeEntry.

    Args:
        record: Parsed JSON object
        position: Index in the file, used in error messages
        dimension: Expected vector length, if already known

    Raises:
        MalformedCorpusError: on missing fields, bad types or wrong dimension
    """
    if not isinstance(record, dict):
        raise MalformedCorpusError(f"Record {position} is not an object")

    for name in TEXT_FIELDS:
        if not isinstance(record.get(name), str):
            raise MalformedCorpusError(f"Record {position} has no string field {name!r}")

    vector = record.get("vector")
    if not isinstance(vector, list) or not vector:
        raise MalformedCorpusError(f"Record {position} has no vector")

    values = []
    for value in vector:
        # bool is an int subclass but never a valid component
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise MalformedCorpusError(f"Record {position} has a non-numeric vector component")
        values.append(float(value))

    if dimension is not None and len(values) != dimension:
        raise MalformedCorpusError(
            f"Record {position} has dimension {len(values)}, expected {dimension}"
        )

    return KnowledgeEntry(
        topic=record["topic"],
        source=record["source"],
        summary=record["summary"],
        action=record["action"],
        vector=tuple(values),
    )


def parse_corpus(records: Sequence[Dict], dimension: Optional[int] = None) -> List[KnowledgeEntry]:
    """
    Validate a list of records.

    The first record fixes the dimension when none is given.
    """
    if not isinstance(records, list):
        raise MalformedCorpusError("Corpus must be a JSON array")

    entries = []
    for position, record in enumerate(records):
        entry = entry_from_record(record, position, dimension)
        if dimension is None:
            dimension = entry.dimension
        entries.append(entry)
    return entries


def load_corpus(
    paths: Iterable[Union[str, Path]],
    dimension: Optional[int] = None,
) -> List[KnowledgeEntry]:
    """
    Load and union one or more knowledge banks.

    Missing files are skipped with a warning so retrieval degrades to "no
    match"; files that exist but are malformed raise.

    Args:
        paths: Corpus JSON files, searched in order
        dimension: Expected vector length for every bank

    Returns:
        All entries in file order
    """
    corpus: List[KnowledgeEntry] = []

    for path in paths:
        path = Path(path)
        if not path.exists():
            logger.warning(f"Knowledge bank not found: {path}")
            continue

        try:
            with path.open("r", encoding="utf-8") as f:
                records = json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedCorpusError(f"{path} is not valid JSON: {e}") from e

        try:
            entries = parse_corpus(records, dimension)
        except MalformedCorpusError as e:
            raise MalformedCorpusError(f"{path}: {e}") from e

        if entries and dimension is None:
            dimension = entries[0].dimension
        corpus.extend(entries)
        logger.info(f"Loaded {len(entries)} knowledge entries from {path}")

    return corpus


def embedding_text(record: Dict) -> str:
    """Text that gets embedded for a dataset record."""
    return f"{record['topic']}. {record['summary']}. {record['action']}"


def build_corpus(dataset: Sequence[Dict], embedder) -> List[KnowledgeEntry]:
    """
    Embed a curated dataset into corpus entries.

    Args:
        dataset: Records with topic/source/summary/action
        embedder: Object with ``embed_documents(texts) -> list of vectors``

    Returns:
        KnowledgeEntry list, one per dataset record, same order
    """
    if not dataset:
        return []

    for position, record in enumerate(dataset):
        for name in TEXT_FIELDS:
            if not isinstance(record.get(name), str):
                raise MalformedCorpusError(f"Dataset record {position} has no string field {name!r}")

    vectors = embedder.embed_documents([embedding_text(record) for record in dataset])
    if len(vectors) != len(dataset):
        raise MalformedCorpusError(
            f"Embedder returned {len(vectors)} vectors for {len(dataset)} records"
        )

    records = [dict(record, vector=list(vector)) for record, vector in zip(dataset, vectors)]
    return parse_corpus(records)


def save_corpus(entries: Sequence[KnowledgeEntry], path: Union[str, Path]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump([entry.to_record() for entry in entries], f, indent=2)
    logger.info(f"Saved {len(entries)} knowledge entries to {path}")
