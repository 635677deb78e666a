import datetime
import uuid
from dataclasses import asdict, is_dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Union

from pydantic import ValidationError

from tradesim.errors.errors import InvalidQuantityError

# --- Sanitization Helper ---


def make_serializable(obj: Any) -> Any:
    """
    Recursively converts non-JSON-safe objects (Decimal, datetime, UUID, Enum, Dataclass)
    into standard Python primitives (str, dict, list).
    """
    # str-based enums (Side) must resolve before the primitive fast path
    if isinstance(obj, Enum):
        return make_serializable(obj.value)

    # Fast path for primitives
    if isinstance(obj, (str, int, float, bool, type(None))):
        return obj

    if isinstance(obj, Mapping):
        return {str(k): make_serializable(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple, set)):
        return [make_serializable(x) for x in obj]

    # Complex types
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (datetime.datetime, datetime.date)):
        return obj.isoformat()
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if is_dataclass(obj) and not isinstance(obj, type):
        return make_serializable(asdict(obj))
    return str(obj)


# --- Other ---


def deep_merge(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def insert_path(tree: dict[str, Any], dotted_path: str, value: Any) -> None:
    """Populate ``tree`` with ``value`` located at ``dotted_path``."""

    segments = [segment.strip() for segment in dotted_path.split(".") if segment.strip()]
    if not segments:
        raise ValueError("Override keys must contain at least one non-empty segment")

    cursor: dict[str, Any] = tree
    for segment in segments[:-1]:
        existing = cursor.get(segment)
        if existing is None:
            next_node: dict[str, Any] = {}
            cursor[segment] = next_node
            cursor = next_node
        elif isinstance(existing, dict):
            cursor = existing
        else:
            raise ValueError(
                (
                    f"Cannot override nested path '{dotted_path}': "
                    f"segment '{segment}' is already a value"
                )
            )

    leaf = segments[-1]
    if isinstance(cursor.get(leaf), dict):
        raise ValueError(
            (f"Cannot assign value to '{dotted_path}': existing node at '{leaf}' is a mapping")
        )
    cursor[leaf] = value


def validation_error_parser(error: ValidationError, component: str) -> list[dict[str, str]]:
    parsed_error = [
        {
            "component": component,
            "path": ".".join(map(str, err["loc"])),
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]
    return parsed_error


# --- Decimals ---


def dec(x: Union[str, int, float, Decimal]) -> Decimal:
    """
    Safe conversion to Decimal:
    - Prefer passing strings (e.g., "150.23") for exact values.
    - Floats are stringified first to avoid binary float artifacts.
    """
    if isinstance(x, Decimal):
        return x
    if isinstance(x, bool):
        raise TypeError("dec(): bool is not a number")
    if isinstance(x, int):
        return Decimal(x)
    if isinstance(x, float):
        return Decimal(str(x))
    # assume string
    return Decimal(x)


# --- Quantities ---


def check_quantity(quantity: Any) -> int:
    """Return ``quantity`` if it is a positive int, else raise InvalidQuantityError."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(quantity)
    if quantity <= 0:
        raise InvalidQuantityError(quantity)
    return quantity
