# Standard library imports
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Union

ScalarValue = Union[str, int, float, bool, None]

_SCALAR_TYPES = (str, int, float, bool, type(None))


def _is_present(value: ScalarValue) -> bool:
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and (value == 0 or value != value):
        return False
    return True


class EventParams(Mapping):
    """
    Read-only view over an event's free-form parameters.

    Values are either scalars (string, number, boolean, null) or opaque
    JSON values (objects, arrays) that are preserved but never interpreted.
    Only a handful of keys carry meaning for aggregation (see ParamKeys).
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping] = None) -> None:
        if isinstance(values, Mapping):
            self._values: Dict[str, Any] = {str(key): value for key, value in values.items()}
        else:
            self._values = {}

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EventParams({self._values!r})"

    def is_opaque(self, key: str) -> bool:
        return key in self._values and not isinstance(self._values[key], _SCALAR_TYPES)

    def scalar(self, key: str) -> ScalarValue:
        """Return the value for key if it is a scalar, otherwise None."""
        value = self._values.get(key)
        return value if isinstance(value, _SCALAR_TYPES) else None

    def text(self, *keys: str, default: str = "") -> str:
        """
        Return the first present, non-empty scalar among keys as a string.

        Empty strings, null, false, zero and NaN count as absent; opaque
        values are skipped.
        """
        for key in keys:
            value = self.scalar(key)
            if not _is_present(value):
                continue
            if value is True:
                return "true"
            return str(value)
        return default

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)


class ParamKeys:
    """Parameter keys recognized by the aggregator"""

    PATH = "path"
    PAGE_PATH = "page_path"
    UID = "uid"
    BUTTON = "button"
    FROM = "from"
    TO = "to"
