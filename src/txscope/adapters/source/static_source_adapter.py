from typing import Dict, List, Optional, Tuple

from txscope.core.dto import RawEvmReceipt, RawEvmTransaction, RawSolanaTransaction
from txscope.core.models import ChainDescriptor, ChainKind
from txscope.ports.transaction_source_port import (
    EvmTransactionSourcePort,
    SolanaTransactionSourcePort,
)


class StaticTransactionSource(EvmTransactionSourcePort, SolanaTransactionSourcePort):
    def __init__(self,
                 evm_transactions: Optional[Dict[str, RawEvmTransaction]] = None,
                 evm_receipts: Optional[Dict[str, RawEvmReceipt]] = None,
                 solana_transactions: Optional[Dict[str, RawSolanaTransaction]] = None,
                 ):
        self._txs = {k.lower(): v for k, v in (evm_transactions or {}).items()}
        self._receipts = {k.lower(): v for k, v in (evm_receipts or {}).items()}
        self._sol = dict(solana_transactions or {})
        self.calls: List[Tuple[str, str, str]] = []

    def get_transaction(self, chain: ChainDescriptor, ref: str, commitment: str = "confirmed"):
        self.calls.append(("get_transaction", chain.key, ref))
        if chain.kind is ChainKind.SOLANA:
            return self._sol.get(ref)
        return self._txs.get(ref.lower())

    def get_receipt(self, chain: ChainDescriptor, tx_hash: str):
        self.calls.append(("get_receipt", chain.key, tx_hash))
        return self._receipts.get(tx_hash.lower())
