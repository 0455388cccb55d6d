from enum import Enum
from typing import Type, TypeVar

from .exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def validate_enum(
    value: str | Enum | None,
    enum_cls: Type[E],
    *,
    field: str,
) -> E | None:
    if value is None or value == "":
        return None

    if isinstance(value, enum_cls):
        return value

    if isinstance(value, str):
        normalized = value.strip()
        try:
            return enum_cls(normalized.lower())
        except ValueError:
            pass

        try:
            return enum_cls[normalized.upper()]
        except KeyError:
            pass

    allowed = ", ".join(e.value for e in enum_cls)
    raise ValidationError(f"Invalid {field}: {value}. Allowed values: {allowed}")
