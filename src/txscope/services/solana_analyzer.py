from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import base58

from txscope.core.dto import RawSolanaMeta, RawSolanaTransaction, RawTokenBalance
from txscope.core.errors import InvalidReference, NotFound, TransactionUnavailable
from txscope.core.models import (
    ChainDescriptor,
    ChainKind,
    NativeBalanceChange,
    SolanaTransactionAnalysis,
    TokenBalanceChange,
    TransactionStatus,
)
from txscope.core.registry import ChainRegistry
from txscope.ports.transaction_source_port import SolanaTransactionSourcePort

logger = logging.getLogger(__name__)

SIGNATURE_BYTES = 64
U64_MAX = 2 ** 64 - 1
DEFAULT_COMMITMENT = "confirmed"


def parse_signature(signature: str) -> str:
    sig = (signature or "").strip()
    try:
        raw = base58.b58decode(sig)
    except ValueError as e:
        raise InvalidReference(f"Invalid signature: {signature!r}") from e
    if not sig or len(raw) != SIGNATURE_BYTES:
        raise InvalidReference(f"Invalid signature: {signature!r}")
    return sig


def parse_token_amount(amount: Optional[str]) -> Optional[int]:
    """Base-unit token amount as an unsigned 64-bit integer, or None if unparseable."""
    if amount is None:
        return None
    s = amount.strip()
    if not (s.isascii() and s.isdigit()):
        return None
    v = int(s)
    return v if v <= U64_MAX else None


def derive_status(meta: RawSolanaMeta) -> TransactionStatus:
    return TransactionStatus.SUCCESS if meta.err is None else TransactionStatus.FAILED


def native_balance_changes(
    account_keys: Sequence[str],
    pre_balances: Sequence[int],
    post_balances: Sequence[int],
) -> List[NativeBalanceChange]:
    out: List[NativeBalanceChange] = []
    for address, pre, post in zip(account_keys, pre_balances, post_balances):
        delta = post - pre
        if delta != 0:
            out.append(
                NativeBalanceChange(
                    address=address,
                    pre_balance=pre,
                    post_balance=post,
                    balance_change=delta,
                )
            )
    return out


def token_balance_changes(
    account_keys: Sequence[str],
    pre_token_balances: Optional[Sequence[RawTokenBalance]],
    post_token_balances: Optional[Sequence[RawTokenBalance]],
) -> List[TokenBalanceChange]:
    """
    Match post token balances to pre balances on (account index, mint).

    A change is reported only when both sides parse and differ. Token accounts
    created by the transaction have no pre entry and are therefore not listed.
    """
    pre_by_key: Dict[Tuple[int, str], RawTokenBalance] = {
        (b.account_index, b.mint): b for b in (pre_token_balances or [])
    }

    out: List[TokenBalanceChange] = []
    for post in post_token_balances or []:
        if not 0 <= post.account_index < len(account_keys):
            logger.debug("token balance index %d outside account keys", post.account_index)
            continue
        account = account_keys[post.account_index]

        pre = pre_by_key.get((post.account_index, post.mint))
        pre_amount = parse_token_amount(pre.amount) if pre is not None else None
        post_amount = parse_token_amount(post.amount)

        delta: Optional[int] = None
        if pre_amount is not None and post_amount is not None:
            delta = post_amount - pre_amount

        if delta:
            out.append(
                TokenBalanceChange(
                    address=account,
                    mint=post.mint,
                    token_account=account,
                    pre_balance=pre_amount,
                    post_balance=post_amount,
                    balance_change=delta,
                    owner=post.owner,
                )
            )
    return out


class SolanaAnalyzer:
    """
    Explains a single Solana transaction from its pre/post balance snapshots.
    """

    def __init__(
        self,
        registry: ChainRegistry,
        source: SolanaTransactionSourcePort,
        commitment: str = DEFAULT_COMMITMENT,
    ) -> None:
        self.registry = registry
        self.source = source
        self.commitment = commitment

    def analyze(self, network_key: str, signature: str) -> SolanaTransactionAnalysis:
        chain = self.registry.resolve_kind(network_key, ChainKind.SOLANA)
        sig = parse_signature(signature)

        logger.info("analyzing %s transaction %s", chain.key, sig)

        tx = self.source.get_transaction(chain, sig, self.commitment)
        if tx is None:
            raise NotFound(f"Transaction not found: {sig}")
        if tx.meta is None:
            raise TransactionUnavailable(f"Transaction meta not available: {sig}")

        analysis = self.derive(chain, sig, tx, tx.meta)
        logger.info("%s on %s: status=%s sol_changes=%d token_changes=%d", sig, chain.key,
                    analysis.transaction_status.value, len(analysis.sol_balance_changes),
                    len(analysis.token_balance_changes))
        return analysis

    @staticmethod
    def derive(
        chain: ChainDescriptor,
        signature: str,
        tx: RawSolanaTransaction,
        meta: RawSolanaMeta,
    ) -> SolanaTransactionAnalysis:
        return SolanaTransactionAnalysis(
            signature=signature,
            network=str(chain.chain_id),
            slot=tx.slot,
            transaction_fee=meta.fee,
            sol_balance_changes=native_balance_changes(
                tx.account_keys, meta.pre_balances, meta.post_balances
            ),
            token_balance_changes=token_balance_changes(
                tx.account_keys, meta.pre_token_balances, meta.post_token_balances
            ),
            transaction_status=derive_status(meta),
            block_time=tx.block_time,
            compute_units_consumed=meta.compute_units_consumed,
            native_token=chain.native_token,
        )

    def explorer_link(self, network_key: str, signature: str) -> str:
        chain = self.registry.resolve_kind(network_key, ChainKind.SOLANA)
        link = f"{chain.explorer_url.rstrip('/')}/tx/{parse_signature(signature)}"
        if chain.chain_id != "mainnet-beta":
            link += f"?cluster={chain.chain_id}"
        return link
