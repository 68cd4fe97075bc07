"""Deployed contract descriptors per chain, loaded once from a static artifact.

The artifact has the shape ``{chain_id: {contract_name: {"address", "abi"}}}``
(chain ids may be JSON strings). Lookups never raise for unknown chains; a
chain with nothing deployed yields an empty mapping and the caller renders a
"not deployed on this network" state.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from web3 import Web3

from precog.config import get_settings

logger = logging.getLogger(__name__)

# Contracts the front-end supports, in display order. Older versions stay in
# the artifact but are hidden.
LATEST_CONTRACT_NAMES: tuple[str, ...] = (
    "PrecogMasterV7",
    "PrecogRealityOracleV2",
    "MateToken",
    "FakeRealityETH",
)


@dataclass(frozen=True)
class ContractDescriptor:
    name: str
    address: str
    abi: tuple[dict, ...]

    def function_abi(self, function_name: str) -> dict | None:
        for entry in self.abi:
            if entry.get("type") == "function" and entry.get("name") == function_name:
                return entry
        return None


def _make_descriptor(chain_id: int, name: str, data: Mapping) -> ContractDescriptor:
    address = data.get("address", "")
    if not Web3.is_address(address):
        raise ValueError(f"Invalid address for {name} on chain_id={chain_id}: {address!r}")
    return ContractDescriptor(
        name=name,
        address=Web3.to_checksum_address(address),
        abi=tuple(data.get("abi", ())),
    )


class ContractRegistry:
    """Read-only chain_id -> contract name -> ContractDescriptor table."""

    def __init__(self, table: Mapping):
        contracts: dict[int, Mapping[str, ContractDescriptor]] = {}
        for chain_key, entries in table.items():
            chain_id = int(chain_key)
            contracts[chain_id] = MappingProxyType({
                name: _make_descriptor(chain_id, name, data) for name, data in entries.items()
            })
        self._contracts: Mapping[int, Mapping[str, ContractDescriptor]] = MappingProxyType(contracts)

    @classmethod
    def from_file(cls, path: Path) -> ContractRegistry:
        with open(path, encoding="utf-8") as f:
            return cls(json.load(f))

    def chain_ids(self) -> list[int]:
        return list(self._contracts.keys())

    def get_all_contracts(self, primary_chain: int) -> dict[str, ContractDescriptor]:
        contracts = self._contracts.get(primary_chain)
        if contracts is None:
            logger.debug(f"No contracts deployed on chain_id={primary_chain}")
            return {}
        return dict(contracts)

    def get_filtered_contracts(
        self, primary_chain: int, allow_list: Iterable[str]
    ) -> dict[str, ContractDescriptor]:
        """Descriptors whose name is in ``allow_list``; unknown names are skipped.

        An ordered allow-list (list/tuple) also sets the result order.
        """
        if isinstance(allow_list, str):
            raise TypeError("allow_list must be a collection of names, not a str")
        contracts = self._contracts.get(primary_chain, {})
        if isinstance(allow_list, (list, tuple)):
            names = allow_list
        else:
            allowed = set(allow_list)
            names = [name for name in contracts if name in allowed]
        return {name: contracts[name] for name in names if name in contracts}

    def get_contract(self, chain_id: int, name: str) -> ContractDescriptor | None:
        return self._contracts.get(chain_id, {}).get(name)

    def get_latest_contracts(
        self,
        chain_id: int | None = None,
        target_networks: tuple[int, ...] | None = None,
    ) -> dict[str, ContractDescriptor]:
        """Latest supported contracts, on the default target network unless given."""
        if not chain_id:
            if target_networks is None:
                target_networks = get_settings().target_network_set
            chain_id = target_networks[0]
        return self.get_filtered_contracts(chain_id, LATEST_CONTRACT_NAMES)


@lru_cache
def get_registry() -> ContractRegistry:
    """Process-wide registry built from the configured artifact."""
    path = get_settings().contracts_path
    if not path.exists():
        logger.warning(f"Contracts artifact not found at {path}; no contracts available")
        return ContractRegistry({})
    registry = ContractRegistry.from_file(path)
    logger.info(f"Loaded contracts for chains {registry.chain_ids()} from {path}")
    return registry
