"""
Movie corpus loading: JSON-lines records into Documents.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from vector_query.config import settings
from vector_query.vector_store.base import Document

CORPUS_PATH = settings.corpus_path
EMBEDDED_TEXT_FIELD = "plot"

logger = logging.getLogger(__name__)


def _document_id(record: Dict[str, Any]) -> str:
    if record.get("id"):
        return str(record["id"])
    # Stable id from title + year; reloading the corpus upserts in place
    key = f"{record.get('title', '')}|{record.get('year', '')}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest()[:16]


def load_movies(path: str | Path | None = None) -> List[Document]:
    """
    Read one movie per line. Records without a plot cannot be embedded and are skipped.
    """
    corpus_path = Path(path or CORPUS_PATH)
    if not corpus_path.exists():
        raise FileNotFoundError(f"Corpus file not found: {corpus_path}")

    documents: List[Document] = []
    skipped = 0
    with corpus_path.open(encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{corpus_path}:{line_no}: invalid JSON ({exc.msg})") from exc

            if not (record.get(EMBEDDED_TEXT_FIELD) or "").strip():
                skipped += 1
                continue

            fields = {key: value for key, value in record.items() if key != "id"}
            documents.append(Document(id=_document_id(record), fields=fields))

    logger.info("Loaded corpus", extra={"path": str(corpus_path), "documents": len(documents), "skipped": skipped})
    return documents


__all__ = ["load_movies", "CORPUS_PATH", "EMBEDDED_TEXT_FIELD"]
