"""Named command registration and dispatch."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

ToolHandler = Callable[[dict[str, object]], dict[str, object]]


@dataclass(slots=True, frozen=True)
class ToolDispatchError(Exception):
    """Dispatch or argument failure reported to the caller with a stable code."""

    code: str
    message: str


@dataclass(slots=True, frozen=True)
class ToolSpec:
    """Registered command: handler plus the argument names it reads."""

    name: str
    handler: ToolHandler
    summary: str
    arguments: tuple[str, ...] = ()


@dataclass(slots=True)
class ToolRegistry:
    """Command registry keyed by name, kept in registration order."""

    _specs: dict[str, ToolSpec] = field(default_factory=dict)

    def register(
        self,
        name: str,
        handler: ToolHandler,
        summary: str = "",
        arguments: tuple[str, ...] = (),
    ) -> None:
        """Register a named handler; re-registering a name replaces it."""
        self._specs[name] = ToolSpec(
            name=name, handler=handler, summary=summary, arguments=arguments
        )

    def get(self, name: str) -> ToolHandler | None:
        """Return a handler by name."""
        spec = self._specs.get(name)
        return spec.handler if spec is not None else None

    def names(self) -> tuple[str, ...]:
        """Return registered command names in registration order."""
        return tuple(self._specs.keys())

    def describe(self) -> list[dict[str, object]]:
        """Return name, summary and argument names of every command."""
        return [
            {"name": spec.name, "summary": spec.summary, "arguments": list(spec.arguments)}
            for spec in self._specs.values()
        ]

    def dispatch(self, name: str, arguments: dict[str, object]) -> dict[str, object]:
        """Run the named command with its arguments."""
        handler = self.get(name)
        if handler is None:
            raise ToolDispatchError(code="UNKNOWN_TOOL", message=f"Unknown tool: {name}")
        return handler(arguments)
