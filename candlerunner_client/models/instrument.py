"""Instrument model for the candlerunner client."""
from dataclasses import dataclass, asdict
from typing import Any


@dataclass(frozen=True)
class Instrument:
    """Tradable instrument known to the service."""
    figi: str          # Identity, referenced by InstrumentValue
    ticker: str
    display_name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)
