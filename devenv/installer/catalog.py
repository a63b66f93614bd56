"""Read-only lookup table of installable tools."""

from collections.abc import Iterator, Mapping

from .models import ToolCategory, ToolDescriptor


class ToolCatalog:
    """Injectable tool table.

    Adding a tool means adding data, never touching the orchestrator.
    Definition order is preserved for listing and status reports.
    """

    def __init__(self, tools: Mapping[str, ToolDescriptor]):
        self._tools = dict(tools)

    @classmethod
    def builtin(cls, extra: Mapping[str, ToolDescriptor] | None = None) -> "ToolCatalog":
        """Bundled catalog, with user-defined entries added or replacing."""
        from devenv.data_loader import get_tools

        tools = dict(get_tools())
        if extra:
            tools.update(extra)
        return cls(tools)

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def by_category(self, category: ToolCategory) -> list[ToolDescriptor]:
        return [t for t in self._tools.values() if t.category == category]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


__all__ = ["ToolCatalog"]
