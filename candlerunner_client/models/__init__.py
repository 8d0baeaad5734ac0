"""Data models for the candlerunner client."""

from candlerunner_client.models.params import (
    ParamType,
    InstrumentValue,
    FloatValue,
    ParamValue,
    ParamDefinition,
    is_instrument_value,
    is_float_value,
)
from candlerunner_client.models.account import Account, AccessLevel, Environment
from candlerunner_client.models.instrument import Instrument
from candlerunner_client.models.strategy import (
    Resolution,
    StrategyDefinition,
    StrategyInstanceDefinition,
    StrategyInstance,
)
from candlerunner_client.models.position_manager import (
    RealtimeOptions,
    BacktestOptions,
    PositionManagerInstanceOptions,
    PositionManagerDefinition,
    PositionManagerInstanceDefinition,
    is_realtime_position_manager_options,
    is_backtest_position_manager_options,
)

__all__ = [
    "ParamType",
    "InstrumentValue",
    "FloatValue",
    "ParamValue",
    "ParamDefinition",
    "is_instrument_value",
    "is_float_value",
    "Account",
    "AccessLevel",
    "Environment",
    "Instrument",
    "Resolution",
    "StrategyDefinition",
    "StrategyInstanceDefinition",
    "StrategyInstance",
    "RealtimeOptions",
    "BacktestOptions",
    "PositionManagerInstanceOptions",
    "PositionManagerDefinition",
    "PositionManagerInstanceDefinition",
    "is_realtime_position_manager_options",
    "is_backtest_position_manager_options",
]
