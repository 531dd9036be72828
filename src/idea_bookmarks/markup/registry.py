"""Dialect registry with content-based selection."""

from __future__ import annotations

from dataclasses import dataclass, field

from idea_bookmarks.markup.base import DialectParser
from idea_bookmarks.markup.global_workspace import GlobalWorkspaceParser
from idea_bookmarks.markup.legacy import LegacyBookmarkParser


@dataclass(slots=True)
class DialectRegistry:
    """Ordered dialect registry; the first parser recognizing a document wins."""

    _parsers: list[DialectParser] = field(default_factory=list)

    def register(self, parser: DialectParser) -> None:
        """Register a parser in deterministic insertion order."""
        self._parsers.append(parser)

    def select(self, text: str) -> DialectParser | None:
        """Return the first parser that recognizes text, or None."""
        for parser in self._parsers:
            if parser.supports_text(text):
                return parser
        return None

    def names(self) -> tuple[str, ...]:
        """Return registered parser names in deterministic order."""
        return tuple(parser.name for parser in self._parsers)


def build_dialect_registry() -> DialectRegistry:
    """Build the registry with the current format ahead of the legacy one."""
    registry = DialectRegistry()
    registry.register(GlobalWorkspaceParser())
    registry.register(LegacyBookmarkParser())
    return registry
