"""Account models for the candlerunner client."""
from dataclasses import dataclass
from enum import Enum
from typing import Any


class AccessLevel(Enum):
    """Broker access granted to an account."""
    UNSPECIFIED = "Unspecified"
    READ_ONLY = "ReadOnly"
    FULL_ACCESS = "FullAccess"
    NO_ACCESS = "NoAccess"


class Environment(Enum):
    """Broker environment an account lives in."""
    PRODUCTION = "Production"
    SANDBOX = "Sandbox"


@dataclass(frozen=True)
class Account:
    """Broker account snapshot from the service."""
    id: str
    name: str
    access_level: AccessLevel
    environment: Environment

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "access_level": self.access_level.value,
            "environment": self.environment.value,
        }
