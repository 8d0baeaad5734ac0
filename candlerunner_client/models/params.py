"""Parameter models for the candlerunner client.

Param values travel as single-key JSON objects where the key names the
variant: ``{"Instrument": "BBG000B9XRY4"}`` or ``{"Float": 20.0}``.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

INSTRUMENT_TAG = "Instrument"
FLOAT_TAG = "Float"


class ParamType(Enum):
    """Declared type of a configurable parameter."""
    INSTRUMENT = "Instrument"
    FLOAT = "Float"


@dataclass(frozen=True)
class InstrumentValue:
    """Reference to an instrument by its figi."""
    instrument: str

    def to_dict(self) -> dict[str, Any]:
        return {INSTRUMENT_TAG: self.instrument}


@dataclass(frozen=True)
class FloatValue:
    """Scalar numeric value."""
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {FLOAT_TAG: self.value}


ParamValue = InstrumentValue | FloatValue


def is_instrument_value(value: ParamValue | Mapping[str, Any]) -> bool:
    """Check whether a param value carries the ``Instrument`` tag.

    Typed values are checked by variant, raw wire mappings by key presence.
    A raw mapping with both tags passes both predicates; rejecting such
    values is left to the decoder.
    """
    if isinstance(value, InstrumentValue):
        return True
    return isinstance(value, Mapping) and INSTRUMENT_TAG in value


def is_float_value(value: ParamValue | Mapping[str, Any]) -> bool:
    """Check whether a param value carries the ``Float`` tag."""
    if isinstance(value, FloatValue):
        return True
    return isinstance(value, Mapping) and FLOAT_TAG in value


def param_type_of(value: ParamValue) -> ParamType:
    """Get the declared type matching a typed param value."""
    if isinstance(value, InstrumentValue):
        return ParamType.INSTRUMENT
    return ParamType.FLOAT


@dataclass(frozen=True)
class ParamDefinition:
    """Describes one configurable parameter of a strategy or position manager."""
    name: str
    description: str
    param_type: ParamType
    default_value: ParamValue | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "param_type": self.param_type.value,
            "default_value": self.default_value.to_dict() if self.default_value is not None else None,
        }


def params_to_dict(params: Mapping[str, ParamValue]) -> dict[str, dict[str, Any]]:
    """Convert a name -> value map into its wire form."""
    return {name: value.to_dict() for name, value in params.items()}
