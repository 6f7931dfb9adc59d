from __future__ import annotations

from typing import Any, Dict, Optional

from txscope.core.models import (
    ChainDescriptor,
    EvmTransactionAnalysis,
    SolanaTransactionAnalysis,
    TransactionAnalysis,
)


def _int_to_str(x: Optional[int]) -> Optional[str]:
    # keep as string for JSON precision safety (256-bit values)
    return str(x) if x is not None else None


def chain_to_dict(c: ChainDescriptor) -> Dict[str, Any]:
    return {
        "key": c.key,
        "kind": c.kind.value,
        "name": c.name,
        "chain_id": c.chain_id,
        "explorer_url": c.explorer_url,
        "native_token": c.native_token,
    }


def evm_analysis_to_dict(a: EvmTransactionAnalysis) -> Dict[str, Any]:
    return {
        "tx_hash": a.tx_hash,
        "chain_name": a.chain_name,
        "chain_id": a.chain_id,
        "native_token": a.native_token,
        "gas_used": _int_to_str(a.gas_used),
        "gas_price": _int_to_str(a.gas_price),
        "gas_limit": _int_to_str(a.gas_limit),
        "transaction_fee": _int_to_str(a.transaction_fee),
        "erc20_transfers": [
            {
                "token_address": t.token_address,
                "from_address": t.from_address,
                "to_address": t.to_address,
                "amount": _int_to_str(t.amount),
            }
            for t in a.erc20_transfers
        ],
        "transaction_status": a.transaction_status.value,
        "block_number": a.block_number,
        "from_address": a.from_address,
        "to_address": a.to_address,
        "value": _int_to_str(a.value),
    }


def solana_analysis_to_dict(a: SolanaTransactionAnalysis) -> Dict[str, Any]:
    return {
        "signature": a.signature,
        "network": a.network,
        "native_token": a.native_token,
        "slot": a.slot,
        "transaction_fee": a.transaction_fee,
        "sol_balance_changes": [
            {
                "address": c.address,
                "pre_balance": c.pre_balance,
                "post_balance": c.post_balance,
                "balance_change": c.balance_change,
            }
            for c in a.sol_balance_changes
        ],
        "token_balance_changes": [
            {
                "address": c.address,
                "owner": c.owner,
                "mint": c.mint,
                "token_account": c.token_account,
                "pre_balance": c.pre_balance,
                "post_balance": c.post_balance,
                "balance_change": c.balance_change,
            }
            for c in a.token_balance_changes
        ],
        "transaction_status": a.transaction_status.value,
        "block_time": a.block_time,
        "compute_units_consumed": a.compute_units_consumed,
    }


def analysis_to_dict(a: TransactionAnalysis) -> Dict[str, Any]:
    if isinstance(a, EvmTransactionAnalysis):
        return evm_analysis_to_dict(a)
    if isinstance(a, SolanaTransactionAnalysis):
        return solana_analysis_to_dict(a)
    raise TypeError(f"unsupported analysis type: {type(a).__name__}")
