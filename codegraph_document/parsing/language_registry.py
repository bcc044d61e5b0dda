"""
Language Registry for Tree-sitter

Resolves language names to grammar handles, so callers can write
``document.set_language("python")`` instead of loading a grammar module.
"""

from pathlib import Path

from tree_sitter import Language
from tree_sitter_language_pack import Error as LanguagePackError
from tree_sitter_language_pack import get_language

from codegraph_document.common.observability import get_logger

logger = get_logger(__name__)

ALIASES = {
    "py": "python",
    "ts": "typescript",
    "js": "javascript",
    "rs": "rust",
    "c++": "cpp",
}

EXTENSIONS = {
    ".py": "python",
    ".pyi": "python",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".json": "json",
    ".go": "go",
    ".java": "java",
    ".rs": "rust",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
}


class LanguageRegistry:
    """
    Registry of grammar handles, loaded lazily and cached.

    Any name known to tree-sitter-language-pack resolves; ``register`` adds
    grammars that come from elsewhere (e.g. a ``tree_sitter_<lang>`` wheel).
    """

    def __init__(self):
        self._languages: dict[str, Language] = {}
        self._missing: set[str] = set()

    @staticmethod
    def canonical_name(name: str) -> str:
        name = name.strip().lower()
        return ALIASES.get(name, name)

    def register(self, name: str, language: Language) -> None:
        """Register a grammar handle under a name"""
        canonical = self.canonical_name(name)
        self._languages[canonical] = language
        self._missing.discard(canonical)

    def get_language(self, name: str) -> Language | None:
        """
        Get the grammar handle for a language name or alias.

        Args:
            name: Language name (python, typescript, ...) or alias (py, ts, ...)

        Returns:
            Language handle, or None if no grammar is available
        """
        canonical = self.canonical_name(name)
        if canonical in self._languages:
            return self._languages[canonical]
        if canonical in self._missing:
            return None

        try:
            language = get_language(canonical)
        except (LanguagePackError, LookupError, ImportError, ValueError) as e:
            logger.warning("language_unavailable", language=canonical, error=str(e))
            self._missing.add(canonical)
            return None

        self._languages[canonical] = language
        logger.debug("language_loaded", language=canonical)
        return language

    def detect_language(self, file_path: str | Path) -> str | None:
        """
        Detect language from file extension.

        Args:
            file_path: Path to source file

        Returns:
            Language name or None if not recognized
        """
        return EXTENSIONS.get(Path(file_path).suffix.lower())

    def supports_language(self, name: str) -> bool:
        return self.get_language(name) is not None

    @property
    def loaded_languages(self) -> list[str]:
        return sorted(self._languages)


# Global registry instance
_registry: LanguageRegistry | None = None


def get_registry() -> LanguageRegistry:
    """Get global language registry instance"""
    global _registry
    if _registry is None:
        _registry = LanguageRegistry()
    return _registry
