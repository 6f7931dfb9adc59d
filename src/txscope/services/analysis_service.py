from __future__ import annotations

from typing import List, Optional

from txscope.core.models import ChainDescriptor, ChainKind, TransactionAnalysis
from txscope.core.registry import ChainRegistry
from txscope.services.evm_analyzer import EvmAnalyzer
from txscope.services.solana_analyzer import SolanaAnalyzer


class AnalysisService:
    """
    Front door for callers that only know a chain key: picks the analyzer
    for the chain's execution model.
    """

    def __init__(self, registry: ChainRegistry, evm: EvmAnalyzer, solana: SolanaAnalyzer) -> None:
        self.registry = registry
        self.evm = evm
        self.solana = solana

    def analyze(self, chain_key: str, reference: str) -> TransactionAnalysis:
        chain = self.registry.resolve(chain_key)
        if chain.kind is ChainKind.EVM:
            return self.evm.analyze(chain.key, reference)
        return self.solana.analyze(chain.key, reference)

    def explorer_link(self, chain_key: str, reference: str) -> str:
        chain = self.registry.resolve(chain_key)
        if chain.kind is ChainKind.EVM:
            return self.evm.explorer_link(chain.key, reference)
        return self.solana.explorer_link(chain.key, reference)

    def supported_chains(self, kind: Optional[ChainKind] = None) -> List[ChainDescriptor]:
        return self.registry.chains(kind)
