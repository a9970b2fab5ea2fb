"""Data models for FetchSERP requests."""

from dataclasses import dataclass, field
from typing import Any, Optional

SUPPORTED_METHODS = ("GET", "POST")


def stringify(value: Any) -> str:
    """Render a scalar the way the API expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class RequestDescriptor:
    """One HTTP call against the FetchSERP API."""

    method: str
    path: str
    params: dict = field(default_factory=dict)
    body: Optional[Any] = None

    def __post_init__(self):
        self.method = self.method.upper()
        if self.method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not self.path:
            raise ValueError("Request path must be a non-empty string")

    def query_items(self) -> list[tuple[str, str]]:
        """
        Encode params as ordered (name, value) pairs.

        None values are dropped. Lists and tuples expand into one
        ``name[]`` entry per element, in order.
        """
        items = []

        for name, value in (self.params or {}).items():
            if value is None:
                continue

            if isinstance(value, (list, tuple)):
                for element in value:
                    if element is None:
                        continue
                    items.append((f"{name}[]", stringify(element)))
            else:
                items.append((name, stringify(value)))

        return items
