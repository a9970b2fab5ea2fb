"""Required-parameter checks for endpoint methods."""

from typing import Any

from .errors import ValidationError


def is_missing(value: Any) -> bool:
    """True for None, empty strings and empty sequences."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return True
    return False


def _quoted(names) -> list[str]:
    return [f'"{name}"' for name in names]


def require(method: str, **params: Any) -> None:
    """
    Raise ValidationError if any of the given params is missing.

    Examples:
        require("get_serp", query=query)
        require("get_page_indexation", domain=domain, keyword=keyword)
    """
    missing = [name for name, value in params.items() if is_missing(value)]
    if not missing:
        return

    if len(missing) == 1:
        message = f"{_quoted(missing)[0]} is required"
    else:
        message = f"{' and '.join(_quoted(missing))} are required"

    raise ValidationError(method, missing, message)


def require_any(method: str, **alternatives: Any) -> None:
    """Raise ValidationError unless at least one alternative is present."""
    if any(not is_missing(value) for value in alternatives.values()):
        return

    names = list(alternatives)
    raise ValidationError(method, names, f"{' or '.join(_quoted(names))} is required")
