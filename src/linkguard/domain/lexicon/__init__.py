"""Word-lists and regex patterns backing the spam and content checks."""

from linkguard.domain.lexicon.loader import DEFAULT_RESOURCE_DIR, LEXICON_FILES, load_lexicon
from linkguard.domain.lexicon.models import Lexicon

__all__ = ["DEFAULT_RESOURCE_DIR", "LEXICON_FILES", "Lexicon", "load_lexicon"]
