from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


# ---- EVM ----

@dataclass(frozen=True)
class RawEvmLog:
    address: str
    topics: Tuple[str, ...]     # 0x-prefixed 32-byte hex words
    data: str = "0x"            # 0x-prefixed hex payload


@dataclass(frozen=True)
class RawEvmTransaction:
    tx_hash: str
    from_address: str
    to_address: Optional[str]   # None for contract creation
    value_wei: int
    gas_limit: int
    gas_price: Optional[int] = None


@dataclass(frozen=True)
class RawEvmReceipt:
    status: Optional[int]       # 1 = success; pre-Byzantium receipts carry none
    gas_used: Optional[int]
    block_number: Optional[int]
    logs: Tuple[RawEvmLog, ...] = ()


# ---- Solana ----

@dataclass(frozen=True)
class RawTokenBalance:
    account_index: int
    mint: str
    amount: str                 # base units, decimal string
    owner: Optional[str] = None
    decimals: Optional[int] = None


@dataclass(frozen=True)
class RawSolanaMeta:
    err: Optional[Any]
    fee: Optional[int]
    pre_balances: List[int] = field(default_factory=list)
    post_balances: List[int] = field(default_factory=list)
    pre_token_balances: Optional[List[RawTokenBalance]] = None
    post_token_balances: Optional[List[RawTokenBalance]] = None
    compute_units_consumed: Optional[int] = None


@dataclass(frozen=True)
class RawSolanaTransaction:
    signature: str
    slot: int
    block_time: Optional[int]
    account_keys: List[str]
    meta: Optional[RawSolanaMeta]
