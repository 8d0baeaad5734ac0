"""JSON parsers for candlerunner service responses.

Each ``parse_*`` function takes already-decoded JSON and returns typed models,
raising DecodeError when the payload does not have the expected shape.
"""
from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar

from candlerunner_client.models import (
    Account,
    AccessLevel,
    Environment,
    Instrument,
    ParamType,
    InstrumentValue,
    FloatValue,
    ParamValue,
    ParamDefinition,
    Resolution,
    StrategyDefinition,
    StrategyInstanceDefinition,
    StrategyInstance,
    RealtimeOptions,
    BacktestOptions,
    PositionManagerInstanceOptions,
    PositionManagerDefinition,
    PositionManagerInstanceDefinition,
)
from candlerunner_client.models.params import INSTRUMENT_TAG, FLOAT_TAG, param_type_of
from candlerunner_client.models.position_manager import REALTIME_TAG, BACKTEST_TAG

E = TypeVar("E", bound=Enum)


class DecodeError(ValueError):
    """Raised when a response payload does not match the expected shape."""

    pass


def _expect_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise DecodeError(f"Invalid {what}: expected object, got {type(raw).__name__}")
    return raw


def _expect_list(raw: Any, what: str) -> list[Any]:
    if not isinstance(raw, list):
        raise DecodeError(f"Invalid {what}: expected array, got {type(raw).__name__}")
    return raw


def _get_str(raw: Mapping[str, Any], key: str, what: str, nullable: bool = False) -> str | None:
    value = raw.get(key)
    if value is None:
        if nullable:
            return None
        raise DecodeError(f"Invalid {what}: missing field `{key}`")
    if not isinstance(value, str):
        raise DecodeError(f"Invalid {what}: field `{key}` must be a string")
    return value


def _get_enum(enum_cls: type[E], raw: Mapping[str, Any], key: str, what: str) -> E:
    value = _get_str(raw, key, what)
    try:
        return enum_cls(value)
    except ValueError as e:
        raise DecodeError(f"Invalid {what}: unknown {key} `{value}`") from e


def _single_tag(raw: Any, tags: tuple[str, str], what: str) -> str:
    """Get the one variant tag present on a field-presence tagged union."""
    raw = _expect_mapping(raw, what)
    present = [tag for tag in tags if tag in raw]
    if len(present) != 1 or len(raw) != 1:
        raise DecodeError(
            f"Invalid {what}: expected exactly one of {', '.join(tags)}, got keys {sorted(raw)}"
        )
    return present[0]


# Param values

def parse_param_value(raw: Any) -> ParamValue:
    """Parse a tagged param value.

    Raises:
        DecodeError: If the value carries no tag, several tags, or a payload
            of the wrong type
    """
    tag = _single_tag(raw, (INSTRUMENT_TAG, FLOAT_TAG), "param value")
    payload = raw[tag]

    if tag == INSTRUMENT_TAG:
        if not isinstance(payload, str):
            raise DecodeError("Invalid param value: Instrument must be a string")
        return InstrumentValue(instrument=payload)

    if isinstance(payload, bool) or not isinstance(payload, (int, float)):
        raise DecodeError("Invalid param value: Float must be a number")
    try:
        return FloatValue(value=float(payload))
    except OverflowError as e:
        raise DecodeError("Invalid param value: Float out of range") from e


def parse_param_values(raw: Any) -> dict[str, ParamValue]:
    """Parse a name -> param value map, keeping the delivered order."""
    raw = _expect_mapping(raw, "params")
    return {name: parse_param_value(value) for name, value in raw.items()}


def parse_param_definition(raw: Any) -> ParamDefinition:
    """Parse a param definition and check its default against its declared type."""
    raw = _expect_mapping(raw, "param definition")
    name = _get_str(raw, "name", "param definition")
    what = f"param definition `{name}`"

    param_type = _get_enum(ParamType, raw, "param_type", what)

    default_value = None
    if raw.get("default_value") is not None:
        default_value = parse_param_value(raw["default_value"])
        if param_type_of(default_value) is not param_type:
            raise DecodeError(
                f"Invalid {what}: default value does not match param type {param_type.value}"
            )

    return ParamDefinition(
        name=name,
        description=_get_str(raw, "description", what),
        param_type=param_type,
        default_value=default_value,
    )


# Reshaping

def flatten_params(raw_params: Mapping[str, Any]) -> list[Any]:
    """Flatten a name-keyed param map into its values, in delivered order.

    The map key is discarded; each value's own ``name`` is authoritative.
    """
    return list(raw_params.values())


def rekey_instances(
    instances: Mapping[str, StrategyInstanceDefinition],
) -> list[StrategyInstance]:
    """Turn an instance id -> definition map into an ordered list of instances."""
    return [
        StrategyInstance(instance_id=instance_id, instance_def=instance_def)
        for instance_id, instance_def in instances.items()
    ]


def group_instances(
    instances: list[StrategyInstance],
) -> dict[str, StrategyInstanceDefinition]:
    """Inverse of rekey_instances."""
    return {instance.instance_id: instance.instance_def for instance in instances}


def _param_definitions(raw: Any, what: str) -> list[ParamDefinition]:
    if isinstance(raw, Mapping):
        raw = flatten_params(raw)
    return [parse_param_definition(item) for item in _expect_list(raw, f"{what} params")]


# Entities

def parse_account(raw: Any) -> Account:
    raw = _expect_mapping(raw, "account")
    return Account(
        id=_get_str(raw, "id", "account"),
        name=_get_str(raw, "name", "account"),
        access_level=_get_enum(AccessLevel, raw, "access_level", "account"),
        environment=_get_enum(Environment, raw, "environment", "account"),
    )


def parse_instrument(raw: Any) -> Instrument:
    raw = _expect_mapping(raw, "instrument")
    return Instrument(
        figi=_get_str(raw, "figi", "instrument"),
        ticker=_get_str(raw, "ticker", "instrument"),
        display_name=_get_str(raw, "display_name", "instrument"),
    )


def parse_strategy_definition(raw: Any) -> StrategyDefinition:
    """Parse a strategy definition, flattening its params map."""
    raw = _expect_mapping(raw, "strategy definition")
    name = _get_str(raw, "strategy_name", "strategy definition")
    what = f"strategy `{name}`"
    return StrategyDefinition(
        strategy_name=name,
        strategy_description=_get_str(raw, "strategy_description", what, nullable=True),
        params=_param_definitions(raw.get("params", {}), what),
    )


def parse_position_manager_definition(raw: Any) -> PositionManagerDefinition:
    """Parse a position manager definition.

    Params arrive as a list; the map form is flattened like strategy params.
    """
    raw = _expect_mapping(raw, "position manager definition")
    name = _get_str(raw, "position_manager_name", "position manager definition")
    what = f"position manager `{name}`"
    return PositionManagerDefinition(
        position_manager_name=name,
        position_manager_description=_get_str(raw, "position_manager_description", what, nullable=True),
        params=_param_definitions(raw.get("params", []), what),
    )


def parse_strategy_instance_definition(raw: Any) -> StrategyInstanceDefinition:
    raw = _expect_mapping(raw, "strategy instance")
    return StrategyInstanceDefinition(
        strategy_name=_get_str(raw, "strategy_name", "strategy instance", nullable=True),
        resolution=_get_enum(Resolution, raw, "resolution", "strategy instance"),
        time_from=_get_str(raw, "time_from", "strategy instance", nullable=True),
        time_to=_get_str(raw, "time_to", "strategy instance", nullable=True),
        params=parse_param_values(raw.get("params", {})),
    )


def parse_position_manager_options(raw: Any) -> PositionManagerInstanceOptions:
    """Parse Realtime/Backtest options tagged by field presence."""
    tag = _single_tag(raw, (REALTIME_TAG, BACKTEST_TAG), "position manager options")
    if tag == BACKTEST_TAG:
        return BacktestOptions()

    payload = _expect_mapping(raw[REALTIME_TAG], "realtime options")
    return RealtimeOptions(account_id=_get_str(payload, "account_id", "realtime options"))


def parse_position_manager_instance_definition(raw: Any) -> PositionManagerInstanceDefinition:
    raw = _expect_mapping(raw, "position manager instance")
    strategies = _expect_list(raw.get("strategies", []), "position manager instance strategies")
    if not all(isinstance(s, str) for s in strategies):
        raise DecodeError("Invalid position manager instance: strategy ids must be strings")

    if "options" not in raw:
        raise DecodeError("Invalid position manager instance: missing field `options`")

    return PositionManagerInstanceDefinition(
        position_manager_name=_get_str(
            raw, "position_manager_name", "position manager instance", nullable=True
        ),
        options=parse_position_manager_options(raw["options"]),
        strategies=list(strategies),
        params=parse_param_values(raw.get("params", {})),
    )


# Endpoint payloads

def parse_accounts(raw: Any) -> list[Account]:
    return [parse_account(item) for item in _expect_list(raw, "accounts")]


def parse_instruments(raw: Any) -> list[Instrument]:
    return [parse_instrument(item) for item in _expect_list(raw, "instruments")]


def parse_strategies(raw: Any) -> list[StrategyDefinition]:
    return [parse_strategy_definition(item) for item in _expect_list(raw, "strategies")]


def parse_position_managers(raw: Any) -> list[PositionManagerDefinition]:
    return [
        parse_position_manager_definition(item)
        for item in _expect_list(raw, "position managers")
    ]


def parse_strategy_instances(raw: Any) -> list[StrategyInstance]:
    """Parse the instance id -> definition map into an ordered instance list."""
    raw = _expect_mapping(raw, "strategy instances")
    definitions = {
        instance_id: parse_strategy_instance_definition(instance_def)
        for instance_id, instance_def in raw.items()
    }
    return rekey_instances(definitions)
