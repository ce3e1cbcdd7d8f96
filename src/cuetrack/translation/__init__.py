"""Translation collaborators, dispatch and source-language resolution."""

from cuetrack.translation.language import heuristic_language, language_root, resolve_source_language
from cuetrack.translation.translator import (
    GlossaryTranslator,
    PassthroughTranslator,
    TranslationDispatcher,
    translate_or_fallback,
)

__all__ = [
    "GlossaryTranslator",
    "PassthroughTranslator",
    "TranslationDispatcher",
    "heuristic_language",
    "language_root",
    "resolve_source_language",
    "translate_or_fallback",
]
