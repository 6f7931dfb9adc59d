from txscope.adapters.source.static_source_adapter import StaticTransactionSource
from txscope.core.dto import (
    RawEvmReceipt,
    RawEvmTransaction,
    RawSolanaMeta,
    RawSolanaTransaction,
    RawTokenBalance,
)
from txscope.core.registry import build_default_registry
from txscope.services.analysis_service import AnalysisService
from txscope.services.evm_analyzer import EvmAnalyzer
from txscope.services.solana_analyzer import SolanaAnalyzer

TX_HASH = "0x" + "cd" * 32
SIG = "1" * 64


def make_service(source: StaticTransactionSource) -> AnalysisService:
    registry = build_default_registry()
    return AnalysisService(
        registry,
        evm=EvmAnalyzer(registry, source),
        solana=SolanaAnalyzer(registry, source),
    )


def make_source() -> StaticTransactionSource:
    return StaticTransactionSource(
        evm_transactions={
            TX_HASH: RawEvmTransaction(
                tx_hash=TX_HASH,
                from_address="0x" + "11" * 20,
                to_address="0x" + "22" * 20,
                value_wei=2**200,
                gas_limit=100000,
                gas_price=7,
            )
        },
        evm_receipts={TX_HASH: RawEvmReceipt(status=1, gas_used=90000, block_number=12)},
        solana_transactions={
            SIG: RawSolanaTransaction(
                signature=SIG,
                slot=9,
                block_time=None,
                account_keys=["A", "B", "T"],
                meta=RawSolanaMeta(
                    err=None,
                    fee=5000,
                    pre_balances=[100, 50, 0],
                    post_balances=[80, 70, 0],
                    pre_token_balances=[RawTokenBalance(2, "M", "10", owner="B")],
                    post_token_balances=[RawTokenBalance(2, "M", "15", owner="B")],
                ),
            )
        },
    )
