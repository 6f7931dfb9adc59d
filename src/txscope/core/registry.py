from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from txscope.config import settings
from txscope.core.errors import UnsupportedChain
from txscope.core.models import ChainDescriptor, ChainKind


def normalize_key(key: str) -> str:
    return (key or "").strip().lower()


class ChainRegistry:
    """
    Read-only lookup from a chain key to its descriptor.

    Built once and shared by every analyzer; nothing mutates it afterwards,
    so concurrent analyses can read it without locking.
    """

    def __init__(self, descriptors: Iterable[ChainDescriptor]) -> None:
        chains = {}
        for d in descriptors:
            k = normalize_key(d.key)
            if not k:
                raise ValueError("chain key must not be empty")
            if k in chains:
                raise ValueError(f"duplicate chain key: {k}")
            chains[k] = d
        self._chains: Mapping[str, ChainDescriptor] = MappingProxyType(chains)

    def resolve(self, key: str) -> ChainDescriptor:
        d = self._chains.get(normalize_key(key))
        if d is None:
            raise UnsupportedChain(f"Chain not supported: {key}")
        return d

    def resolve_kind(self, key: str, kind: ChainKind) -> ChainDescriptor:
        d = self.resolve(key)
        if d.kind is not kind:
            raise UnsupportedChain(f"Chain {key} is not a {kind.value} chain")
        return d

    def chains(self, kind: Optional[ChainKind] = None) -> List[ChainDescriptor]:
        return [
            self._chains[k]
            for k in sorted(self._chains)
            if kind is None or self._chains[k].kind is kind
        ]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._chains

    def __len__(self) -> int:
        return len(self._chains)


def default_descriptors() -> List[ChainDescriptor]:
    evm = ChainKind.EVM
    sol = ChainKind.SOLANA
    return [
        ChainDescriptor("ethereum", evm, "Ethereum Mainnet", 1, "https://etherscan.io", "ETH", settings.ETH_RPC_URL),
        ChainDescriptor("base", evm, "Base", 8453, "https://basescan.org", "ETH", settings.BASE_RPC_URL),
        ChainDescriptor("arbitrum", evm, "Arbitrum One", 42161, "https://arbiscan.io", "ETH", settings.ARBITRUM_RPC_URL),
        ChainDescriptor("avalanche", evm, "Avalanche C-Chain", 43114, "https://snowtrace.io", "AVAX", settings.AVAX_RPC_URL),
        ChainDescriptor("polygon", evm, "Polygon Mainnet", 137, "https://polygonscan.com", "MATIC", settings.POLYGON_RPC_URL),
        ChainDescriptor("optimism", evm, "Optimism Mainnet", 10, "https://optimistic.etherscan.io", "ETH", settings.OPTIMISM_RPC_URL),
        ChainDescriptor("unichain", evm, "Unichain Mainnet", 130, "https://uniscan.xyz", "ETH", settings.UNICHAIN_RPC_URL),
        ChainDescriptor("solana", sol, "Solana Mainnet", "mainnet-beta", "https://explorer.solana.com", "SOL", settings.SOLANA_MAINNET_RPC_URL),
        ChainDescriptor("solana-devnet", sol, "Solana Devnet", "devnet", "https://explorer.solana.com", "SOL", settings.SOLANA_DEVNET_RPC_URL),
    ]


def build_default_registry() -> ChainRegistry:
    return ChainRegistry(default_descriptors())
