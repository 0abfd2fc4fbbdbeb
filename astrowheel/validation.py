"""Input checks for chart data at the public boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, List, Mapping

__all__ = ["ChartDataError", "ValidationStatus", "ensure_valid", "validate"]


class ChartDataError(ValueError):
    """Raised when chart data fails validation."""

    def __init__(self, messages: List[str]) -> None:
        super().__init__(" ".join(messages))
        self.messages = list(messages)


@dataclass(frozen=True)
class ValidationStatus:
    has_error: bool
    messages: List[str] = field(default_factory=list)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def validate(data: Any) -> ValidationStatus:
    """Collect every problem with ``data`` instead of stopping at the first.

    Expected shape::

        {"planets": {"Sun": [lon] | [lon, speed], ...},
         "cusps": [12 numbers] | None}
    """

    if data is None:
        return ValidationStatus(True, ["Data is not set."])
    if not isinstance(data, Mapping):
        return ValidationStatus(True, ["Data must be a mapping."])

    messages: List[str] = []
    planets = data.get("planets")
    if not isinstance(planets, Mapping):
        messages.append("There are no planets.")
    else:
        for name, values in planets.items():
            if not _is_sequence(values):
                messages.append(f"The planets property '{name}' has to be Array.")
            elif len(values) not in (1, 2) or not all(_is_number(v) for v in values):
                messages.append(
                    f"The planets property '{name}' has to be Array of 1 or 2 numbers."
                )

    cusps = data.get("cusps")
    if cusps is not None:
        if not _is_sequence(cusps):
            messages.append("Property 'cusps' has to be Array.")
        elif len(cusps) != 12:
            messages.append("Count of 'cusps' values has to be 12.")
        elif not all(_is_number(v) for v in cusps):
            messages.append("Property 'cusps' has to contain only numbers.")

    return ValidationStatus(bool(messages), messages)


def ensure_valid(data: Any) -> Mapping[str, Any]:
    """Return ``data`` unchanged or raise :class:`ChartDataError`."""

    status = validate(data)
    if status.has_error:
        raise ChartDataError(status.messages)
    return data
