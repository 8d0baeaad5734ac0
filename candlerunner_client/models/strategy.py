"""Strategy models for the candlerunner client."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from candlerunner_client.models.params import ParamDefinition, ParamValue, params_to_dict


class Resolution(Enum):
    """Candle resolution a strategy instance runs on."""
    ONE_MINUTE = "OneMinute"
    ONE_HOUR = "OneHour"
    ONE_DAY = "OneDay"


@dataclass
class StrategyDefinition:
    """Strategy type available on the service, with its parameters."""
    strategy_name: str
    strategy_description: str | None = None
    params: list[ParamDefinition] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire form, params keyed by their own name.

        Raises:
            ValueError: If two params share a name and cannot both be keyed
        """
        params: dict[str, Any] = {}
        for p in self.params:
            if p.name in params:
                raise ValueError(
                    f"Strategy `{self.strategy_name}` has duplicate param `{p.name}`"
                )
            params[p.name] = p.to_dict()

        d: dict[str, Any] = {"strategy_name": self.strategy_name}
        if self.strategy_description is not None:
            d["strategy_description"] = self.strategy_description
        d["params"] = params
        return d


@dataclass
class StrategyInstanceDefinition:
    """Concrete, parameterized configuration of a strategy type."""
    strategy_name: str | None         # None for a template not bound to a type yet
    resolution: Resolution
    time_from: str | None = None
    time_to: str | None = None
    params: dict[str, ParamValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "strategy_name": self.strategy_name,
            "time_from": self.time_from,
            "time_to": self.time_to,
            "resolution": self.resolution.value,
            "params": params_to_dict(self.params),
        }


@dataclass
class StrategyInstance:
    """Strategy instance definition together with its server-assigned id."""
    instance_id: str
    instance_def: StrategyInstanceDefinition

    def to_dict(self) -> dict[str, Any]:
        return {
            "instanceId": self.instance_id,
            "instanceDef": self.instance_def.to_dict(),
        }
