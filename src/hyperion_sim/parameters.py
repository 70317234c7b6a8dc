# MIT License (see LICENSE)
"""
User-adjustable parameters.

A simulation declares its parameters once, as an immutable tuple of
ParameterSpec descriptors. Each instance then owns a ParameterSet holding
the current values. Values are validated when they are set, so the
physics code downstream can trust them:

- numbers are clamped into [min, max]
- NaN falls back to the declared default
- integer parameters are rounded
- boolean parameters accept bools, 0 and 1; anything else (NaN, "false")
  falls back to the default
- unknown choices fall back to the default
- unknown ids raise ValueError

Example:
    DAMPING = ParameterSpec("damping", "Damping", 0.0, 2.0, 0.01, 0.05, unit="kg/s")
    params = ParameterSet((DAMPING,))
    params.set("damping", -5)   # -> 0.0, with a warning logged
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator
import logging
import math
import numbers

import numpy as np

from .util import clamp

logger = logging.getLogger(__name__)

KINDS = ("float", "int", "bool", "choice")


@dataclass(frozen=True)
class ParameterSpec:
    """
    Descriptor of one adjustable parameter.

    Attributes:
        id: Stable key used by set_parameter().
        name: Human-readable label.
        min: Lower bound (ignored for choice parameters).
        max: Upper bound (ignored for choice parameters).
        step: Suggested slider increment.
        default: Value used at construction and as the NaN fallback.
        unit: Display unit, e.g. "m/s²".
        kind: One of "float", "int", "bool", "choice".
        choices: Allowed values for kind == "choice".
        structural: Changing the value rebuilds the state (implicit reset).
        description: Short explanation for tooltips.
    """
    id: str
    name: str
    min: float = 0.0
    max: float = 1.0
    step: float = 0.01
    default: Any = 0.0
    unit: str = ""
    kind: str = "float"
    choices: tuple = ()
    structural: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(f"Unknown parameter kind: {self.kind}")
        if self.kind == "choice":
            if self.default not in self.choices:
                raise ValueError(f"Default {self.default!r} of '{self.id}' is not a valid choice")
        elif self.kind != "bool":
            if self.min > self.max:
                raise ValueError(f"Parameter '{self.id}' has min > max")
            if not (self.min <= self.default <= self.max):
                raise ValueError(f"Default of '{self.id}' lies outside [{self.min}, {self.max}]")

    def coerce(self, value: Any) -> tuple[Any, bool]:
        """
        Validate a raw value against this descriptor.

        Returns:
            Tuple (value, adjusted) where adjusted is True when the input
            had to be clamped or replaced.
        """
        if self.kind == "bool":
            if isinstance(value, (bool, np.bool_)):
                return bool(value), False
            if isinstance(value, numbers.Integral) and value in (0, 1):
                return bool(value), False
            return self.default, True

        if self.kind == "choice":
            if value in self.choices:
                return value, False
            return self.default, True

        try:
            x = float(value)
        except (TypeError, ValueError):
            return self.default, True
        if math.isnan(x):
            return self.default, True

        clamped = clamp(x, self.min, self.max)
        if self.kind == "int":
            clamped = int(round(clamped))
        return clamped, clamped != x


@dataclass
class ParameterSet:
    """
    Mutable values for an immutable tuple of ParameterSpec descriptors.

    Attributes:
        specs: The schema, shared by every instance of a simulation class.
        values: Current value per parameter id.
    """
    specs: tuple[ParameterSpec, ...]
    values: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._by_id = {s.id: s for s in self.specs}
        if len(self._by_id) != len(self.specs):
            raise ValueError("Duplicate parameter ids in schema")
        overrides = dict(self.values)
        self.values = {s.id: s.default for s in self.specs}
        for key, value in overrides.items():
            self.set(key, value)

    def spec(self, param_id: str) -> ParameterSpec:
        """Return the descriptor for param_id, raising ValueError if unknown."""
        try:
            return self._by_id[param_id]
        except KeyError:
            raise ValueError(f"Unknown parameter: {param_id}") from None

    def set(self, param_id: str, value: Any) -> Any:
        """
        Validate and store a value.

        Returns:
            The value actually stored (after clamping/rounding/fallback).
        """
        spec = self.spec(param_id)
        coerced, adjusted = spec.coerce(value)
        if adjusted:
            logger.warning("Parameter '%s': %r adjusted to %r", param_id, value, coerced)
        self.values[param_id] = coerced
        return coerced

    def get(self, param_id: str) -> Any:
        return self.values[self.spec(param_id).id]

    def __getitem__(self, param_id: str) -> Any:
        return self.get(param_id)

    def __contains__(self, param_id: object) -> bool:
        return param_id in self._by_id

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def as_dict(self) -> dict[str, Any]:
        """Copy of the current values."""
        return dict(self.values)

    def update(self, values: dict[str, Any] | Iterable[tuple[str, Any]]) -> None:
        for key, value in dict(values).items():
            self.set(key, value)
