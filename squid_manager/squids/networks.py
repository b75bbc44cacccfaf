"""
Network registry and project naming rules for squid services.
Each project indexes a fixed, ordered set of chains, and each chain is scraped on its own port.
The mapping is resolved once per project so callers never branch on service-name substrings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

SQUID_SERVICE_MARKER: Final[str] = "-squid-server"
PROJECT_SEPARATOR: Final[str] = "-squid-server-"
CANONICAL_SCHEMA_PREFIX: Final[str] = "squid_"


class Network(str, Enum):
    ETHEREUM = "ETHEREUM"
    MATIC = "MATIC"


@dataclass(frozen=True)
class NetworkPort:
    network: Network
    port: int


ETHEREUM_PORT: Final[NetworkPort] = NetworkPort(Network.ETHEREUM, 3000)
MATIC_PORT: Final[NetworkPort] = NetworkPort(Network.MATIC, 3001)

DEFAULT_NETWORKS: Final[tuple[NetworkPort, ...]] = (ETHEREUM_PORT, MATIC_PORT)

PROJECT_NETWORKS: Final[dict[str, tuple[NetworkPort, ...]]] = {
    "credits": (MATIC_PORT,),
}


def project_name_from_service(service_name: str) -> str:
    """Return the project prefix, e.g. `marketplace-squid-server-a-blue-92e812a` -> `marketplace`."""

    return service_name.split(PROJECT_SEPARATOR, 1)[0]


def canonical_schema_name(project_name: str) -> str:
    return f"{CANONICAL_SCHEMA_PREFIX}{project_name}"


def networks_for_project(project_name: str) -> tuple[NetworkPort, ...]:
    return PROJECT_NETWORKS.get(project_name, DEFAULT_NETWORKS)


def networks_for_service(service_name: str) -> tuple[NetworkPort, ...]:
    return networks_for_project(project_name_from_service(service_name))


def is_squid_service(service_identifier: str) -> bool:
    return SQUID_SERVICE_MARKER in service_identifier
