"""Queryable view over a decoded APIC response body.

APIC wraps every result in an ``imdata`` envelope, so most lookups are short
dotted paths such as ``imdata.0.aaaLogin.attributes.token``. ``Res.get`` walks
such a path; missing steps produce an empty ``Res`` instead of raising.
"""

import json
from typing import Any

_MISSING = object()


class Res:
    """A decoded JSON value together with its raw text."""

    def __init__(self, value: Any = _MISSING, raw: str = "", status_code: int = 0):
        self._value = value
        self.raw = raw
        self.status_code = status_code

    @classmethod
    def parse(cls, content: bytes, status_code: int = 0) -> "Res":
        """Decode a response body. An empty body yields an empty document.

        Raises ValueError if the body is not valid JSON.
        """
        text = content.decode("utf-8") if content else ""
        if not text.strip():
            return cls(raw=text, status_code=status_code)
        return cls(json.loads(text), raw=text, status_code=status_code)

    @property
    def exists(self) -> bool:
        return self._value is not _MISSING

    @property
    def value(self) -> Any:
        """The decoded value, or None when the path did not resolve."""
        return None if self._value is _MISSING else self._value

    @property
    def text(self) -> str:
        """The value if it is a string, else an empty string."""
        return self._value if isinstance(self._value, str) else ""

    def get(self, path: str) -> "Res":
        current = self._value
        for segment in path.split("."):
            if isinstance(current, dict):
                current = current.get(segment, _MISSING)
            elif isinstance(current, list) and segment.isdigit():
                index = int(segment)
                current = current[index] if index < len(current) else _MISSING
            else:
                current = _MISSING
            if current is _MISSING:
                return Res(status_code=self.status_code)
        return Res(current, raw=json.dumps(current), status_code=self.status_code)

    def items(self) -> list["Res"]:
        """List elements as documents; empty if the value is not a list."""
        if not isinstance(self._value, list):
            return []
        return [Res(item, raw=json.dumps(item), status_code=self.status_code) for item in self._value]

    def __bool__(self) -> bool:
        return self.exists

    def __repr__(self) -> str:
        return f"Res({self.raw!r})"
