from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class ChainKind(str, Enum):
    EVM = "evm"
    SOLANA = "solana"


class TransactionStatus(str, Enum):
    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"



# Chain metadata

@dataclass(frozen=True)
class ChainDescriptor:
    """
    Static description of one supported chain / network.
    """

    key: str
    kind: ChainKind
    name: str
    chain_id: Union[int, str]       # numeric for EVM, cluster name for Solana
    explorer_url: str
    native_token: str
    rpc_url: str = field(default="", repr=False)



# EVM analysis

@dataclass(frozen=True)
class TokenTransfer:

    token_address: str
    from_address: str
    to_address: str
    amount: int


@dataclass(frozen=True)
class EvmTransactionAnalysis:

    tx_hash: str
    chain_name: str
    gas_used: Optional[int]
    gas_price: Optional[int]
    gas_limit: int
    transaction_fee: Optional[int]
    erc20_transfers: List[TokenTransfer]
    transaction_status: TransactionStatus
    block_number: Optional[int]
    from_address: str
    to_address: Optional[str]
    value: int

    chain_id: Optional[int] = None
    native_token: Optional[str] = None



# Account-model (Solana) analysis

@dataclass(frozen=True)
class NativeBalanceChange:

    address: str
    pre_balance: int
    post_balance: int
    balance_change: int


@dataclass(frozen=True)
class TokenBalanceChange:

    address: str
    mint: str
    token_account: str
    pre_balance: Optional[int]
    post_balance: Optional[int]
    balance_change: Optional[int]
    owner: Optional[str] = None


@dataclass(frozen=True)
class SolanaTransactionAnalysis:

    signature: str
    network: str
    slot: Optional[int]
    transaction_fee: Optional[int]
    sol_balance_changes: List[NativeBalanceChange]
    token_balance_changes: List[TokenBalanceChange]
    transaction_status: TransactionStatus
    block_time: Optional[int]
    compute_units_consumed: Optional[int]

    native_token: Optional[str] = None


TransactionAnalysis = Union[EvmTransactionAnalysis, SolanaTransactionAnalysis]
