"""Load lexicon resource files.

Each file holds one entry per line. Blank lines and lines starting with ``#``
are skipped. A file that cannot be read degrades to an empty collection so the
analyzers keep running with reduced sensitivity.
"""

from __future__ import annotations

import logging
from pathlib import Path
import re

from linkguard.core.errors import LexiconLoadError
from linkguard.domain.lexicon.models import Lexicon

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_DIR = Path(__file__).resolve().parent / "resources"
LEXICON_FILES = {
    "spam_keywords": "spam_keywords.txt",
    "scam_keywords": "scam_keywords.txt",
    "legitimate_terms": "legitimate_terms.txt",
    "spam_patterns": "spam_patterns.txt",
    "suspicious_sender_patterns": "suspicious_senders.txt",
}


def _read_entries(path: Path) -> list[str]:
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LexiconLoadError(f"{path.name}: {exc}") from exc
    entries: list[str] = []
    for line in raw.splitlines():
        clean = line.strip()
        if clean and not clean.startswith("#"):
            entries.append(clean)
    return entries


def _load_strings(path: Path, warnings: list[str]) -> frozenset[str]:
    try:
        entries = _read_entries(path)
    except LexiconLoadError as exc:
        logger.warning("Lexicon file unavailable, dimension disabled: %s", exc)
        warnings.append(str(exc))
        return frozenset()
    return frozenset(item.lower() for item in entries)


def _load_patterns(path: Path, warnings: list[str]) -> tuple[re.Pattern[str], ...]:
    try:
        entries = _read_entries(path)
    except LexiconLoadError as exc:
        logger.warning("Lexicon file unavailable, dimension disabled: %s", exc)
        warnings.append(str(exc))
        return ()
    patterns: list[re.Pattern[str]] = []
    for entry in entries:
        try:
            patterns.append(re.compile(entry, re.IGNORECASE))
        except re.error as exc:
            message = f"{path.name}: invalid pattern {entry!r}: {exc}"
            logger.warning("Skipping lexicon pattern: %s", message)
            warnings.append(message)
    return tuple(patterns)


def load_lexicon(resource_dir: str | Path | None = None) -> Lexicon:
    base = Path(resource_dir) if resource_dir is not None else DEFAULT_RESOURCE_DIR
    warnings: list[str] = []
    lexicon = Lexicon(
        spam_keywords=_load_strings(base / LEXICON_FILES["spam_keywords"], warnings),
        scam_keywords=_load_strings(base / LEXICON_FILES["scam_keywords"], warnings),
        legitimate_terms=_load_strings(base / LEXICON_FILES["legitimate_terms"], warnings),
        spam_patterns=_load_patterns(base / LEXICON_FILES["spam_patterns"], warnings),
        suspicious_sender_patterns=_load_patterns(base / LEXICON_FILES["suspicious_sender_patterns"], warnings),
        load_warnings=tuple(warnings),
    )
    logger.info(
        "Lexicon loaded: %d spam keywords, %d scam keywords, %d legit terms, %d patterns, %d sender patterns",
        len(lexicon.spam_keywords),
        len(lexicon.scam_keywords),
        len(lexicon.legitimate_terms),
        len(lexicon.spam_patterns),
        len(lexicon.suspicious_sender_patterns),
    )
    return lexicon
