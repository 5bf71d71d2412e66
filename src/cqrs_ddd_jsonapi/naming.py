"""Attribute naming policies (``IAttributeNaming`` implementations)."""

from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """``firstName`` -> ``first_name``; ``HTTPStatus`` -> ``http_status``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def camel_case(name: str) -> str:
    """``first_name`` -> ``firstName``; leading/trailing underscores are kept."""
    stripped = name.strip("_")
    if not stripped:
        return name
    head, *tail = stripped.split("_")
    converted = head + "".join(p[:1].upper() + p[1:] for p in tail if p)
    prefix = name[: len(name) - len(name.lstrip("_"))]
    suffix = name[len(name.rstrip("_")) :]
    return f"{prefix}{converted}{suffix}"


class IdentityNaming:
    """Names are used as-is on both sides."""

    def to_storage_name(self, name: str) -> str:
        return name

    def to_domain_name(self, name: str) -> str:
        return name


class SnakeCaseNaming:
    """camelCase API names over snake_case mapped attributes.

    Snake-case input is accepted too, so ``firstName`` and ``first_name``
    both resolve to the ``first_name`` attribute.
    """

    def to_storage_name(self, name: str) -> str:
        return snake_case(name)

    def to_domain_name(self, name: str) -> str:
        return camel_case(name)


IDENTITY_NAMING = IdentityNaming()
