"""Position manager models for the candlerunner client."""
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from candlerunner_client.models.params import ParamDefinition, ParamValue, params_to_dict

REALTIME_TAG = "Realtime"
BACKTEST_TAG = "Backtest"


@dataclass(frozen=True)
class RealtimeOptions:
    """Run the position manager against a live broker account."""
    account_id: str

    def to_dict(self) -> dict[str, Any]:
        return {REALTIME_TAG: {"account_id": self.account_id}}


@dataclass(frozen=True)
class BacktestOptions:
    """Run the position manager in backtest mode. Carries no payload."""

    def to_dict(self) -> dict[str, Any]:
        return {BACKTEST_TAG: {}}


PositionManagerInstanceOptions = RealtimeOptions | BacktestOptions


def is_realtime_position_manager_options(
    options: PositionManagerInstanceOptions | Mapping[str, Any],
) -> bool:
    """Check whether options carry the ``Realtime`` branch.

    Raw wire mappings are checked by key presence only.
    """
    if isinstance(options, RealtimeOptions):
        return True
    return isinstance(options, Mapping) and REALTIME_TAG in options


def is_backtest_position_manager_options(
    options: PositionManagerInstanceOptions | Mapping[str, Any],
) -> bool:
    """Check whether options carry the ``Backtest`` branch."""
    if isinstance(options, BacktestOptions):
        return True
    return isinstance(options, Mapping) and BACKTEST_TAG in options


@dataclass
class PositionManagerDefinition:
    """Position manager type available on the service, with its parameters."""
    position_manager_name: str
    position_manager_description: str | None = None
    params: list[ParamDefinition] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {"position_manager_name": self.position_manager_name}
        if self.position_manager_description is not None:
            d["position_manager_description"] = self.position_manager_description
        d["params"] = [p.to_dict() for p in self.params]
        return d


@dataclass
class PositionManagerInstanceDefinition:
    """Concrete configuration of a position manager over a set of strategies."""
    position_manager_name: str | None
    options: PositionManagerInstanceOptions
    strategies: list[str] = field(default_factory=list)  # strategy instance ids
    params: dict[str, ParamValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "position_manager_name": self.position_manager_name,
            "strategies": list(self.strategies),
            "options": self.options.to_dict(),
            "params": params_to_dict(self.params),
        }
