"""Split raw filter values into atomic values.

A comma separates values unless it is escaped with a backslash::

    split_values("t-rex,triceratops")  -> ["t-rex", "triceratops"]
    split_values("nothing\\, here")     -> ["nothing, here"]

No trimming or case folding happens here; interpreting a value (the
``"null"`` sentinel, numeric coercion) is left to the consumer.
"""

from __future__ import annotations

import re
from typing import Any

SEPARATOR = ","
ESCAPE = "\\"

_SPLIT_RE = re.compile(r"(?<!\\),")
_ESCAPED_SEPARATOR = ESCAPE + SEPARATOR


def split_values(raw: Any) -> list[Any]:
    """Return the ordered atomic values contained in *raw*.

    Strings are split on unescaped commas. Lists and tuples are treated as
    already split. Any other scalar (``None``, numbers, booleans) is
    returned as a one-element list.
    """
    if isinstance(raw, str):
        return [
            part.replace(_ESCAPED_SEPARATOR, SEPARATOR)
            for part in _SPLIT_RE.split(raw)
        ]
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [raw]
