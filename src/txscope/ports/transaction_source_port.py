from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from txscope.core.dto import RawEvmReceipt, RawEvmTransaction, RawSolanaTransaction
from txscope.core.models import ChainDescriptor


class EvmTransactionSourcePort(ABC):
    """
    Fetches raw EVM records for a chain. ``None`` means the node has no record.
    Transport failures raise ``SourceUnavailable``.
    """

    # --- transaction by hash ---

    @abstractmethod
    def get_transaction(self, chain: ChainDescriptor, tx_hash: str) -> Optional[RawEvmTransaction]:
        raise NotImplementedError

    # --- receipt (absent while unsettled) ---

    @abstractmethod
    def get_receipt(self, chain: ChainDescriptor, tx_hash: str) -> Optional[RawEvmReceipt]:
        raise NotImplementedError


class SolanaTransactionSourcePort(ABC):

    @abstractmethod
    def get_transaction(
        self,
        chain: ChainDescriptor,
        signature: str,
        commitment: str = "confirmed",
    ) -> Optional[RawSolanaTransaction]:
        raise NotImplementedError
