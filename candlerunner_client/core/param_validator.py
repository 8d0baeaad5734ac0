"""Validation of instance params against strategy/position manager definitions."""
import logging
from collections.abc import Mapping

from candlerunner_client.core.store import Store
from candlerunner_client.models import Instrument, InstrumentValue, ParamDefinition, ParamValue
from candlerunner_client.models.params import param_type_of

logger = logging.getLogger(__name__)


class ParamError(ValueError):
    """Raised when instance params do not satisfy their definitions."""

    def __init__(self, message: str, param_name: str):
        super().__init__(message)
        self.param_name = param_name


class ParamMissingError(ParamError):
    def __init__(self, param_name: str):
        super().__init__(f"Parameter `{param_name}` is not specified", param_name)


class InvalidParamError(ParamError):
    def __init__(self, param_name: str):
        super().__init__(f"Invalid parameter `{param_name}`", param_name)


class ParamTypeMismatchError(ParamError):
    def __init__(self, param_name: str):
        super().__init__(f"Parameter `{param_name}` is of wrong type", param_name)


class UnknownInstrumentError(ParamError):
    def __init__(self, param_name: str, figi: str):
        super().__init__(f"Parameter `{param_name}` has unknown instrument value `{figi}`", param_name)
        self.figi = figi


class ParamValidator:
    """Checks params against definitions using the currently known instruments."""

    def __init__(self, instruments: Store[list[Instrument]]):
        self.instruments = instruments

    def validate(
        self,
        param_definitions: list[ParamDefinition],
        params: Mapping[str, ParamValue],
    ) -> None:
        """Validate a params map.

        Args:
            param_definitions: Expected params, e.g. StrategyDefinition.params
            params: Concrete values keyed by param name

        Raises:
            InvalidParamError: If a param has no definition
            ParamMissingError: If a defined param has no value
            ParamTypeMismatchError: If a value's variant differs from param_type
            UnknownInstrumentError: If an instrument value is not a known figi
        """
        expected = {definition.name for definition in param_definitions}
        for param_name in params:
            if param_name not in expected:
                raise InvalidParamError(param_name)

        known_figis = {instrument.figi for instrument in self.instruments.value}

        for definition in param_definitions:
            if definition.name not in params:
                raise ParamMissingError(definition.name)

            value = params[definition.name]
            if param_type_of(value) is not definition.param_type:
                raise ParamTypeMismatchError(definition.name)

            if isinstance(value, InstrumentValue) and value.instrument not in known_figis:
                raise UnknownInstrumentError(definition.name, value.instrument)

        logger.debug(f"Validated {len(params)} params")


def default_params(param_definitions: list[ParamDefinition]) -> dict[str, ParamValue]:
    """Collect the declared defaults, skipping params without one."""
    return {
        definition.name: definition.default_value
        for definition in param_definitions
        if definition.default_value is not None
    }
