# ABOUTME: Typed view over a Notion page's property bag.
# ABOUTME: Lets callers narrow to a property type instead of scanning raw dicts.

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PageProperty:
    """One named page property, keyed by its Notion type."""
    name: str
    type: str
    value: Any

    @classmethod
    def from_api(cls, name: str, prop: Any) -> "PageProperty":
        if not isinstance(prop, dict):
            return cls(name=name, type="", value=None)
        prop_type = prop.get("type") or ""
        return cls(name=name, type=prop_type, value=prop.get(prop_type))


class PropertyBag(Mapping[str, PageProperty]):
    """Read-only, ordered mapping of property name to PageProperty."""

    def __init__(self, properties: Mapping[str, PageProperty] | None = None):
        self._properties = dict(properties or {})

    @classmethod
    def from_api(cls, properties: Any) -> "PropertyBag":
        """Build from the ``properties`` object of a Notion page."""
        if not isinstance(properties, dict):
            return cls()
        return cls({
            name: PageProperty.from_api(name, prop)
            for name, prop in properties.items()
        })

    def __getitem__(self, name: str) -> PageProperty:
        return self._properties[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"PropertyBag({list(self._properties)!r})"

    def of_type(self, prop_type: str) -> list[PageProperty]:
        """All properties of the given Notion type, in order."""
        return [p for p in self._properties.values() if p.type == prop_type]

    def find_title(self) -> str | None:
        """First text run of the first non-empty title property."""
        for prop in self.of_type("title"):
            runs = prop.value
            if isinstance(runs, list) and runs and isinstance(runs[0], dict):
                return runs[0].get("plain_text", "")
        return None
