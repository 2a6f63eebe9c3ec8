"""Reading JSON with ``//`` and ``/* */`` comments."""

from typing import Any

import json5

from .errors import MalformedStateError


def loads(text: str) -> Any:
    """Parse a JSONC document.

    Raises MalformedStateError if the text is not valid JSON5.
    """
    try:
        return json5.loads(text)
    except ValueError as e:
        raise MalformedStateError(str(e)) from e
