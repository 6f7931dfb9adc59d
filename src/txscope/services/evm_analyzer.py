from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from txscope.core.dto import RawEvmLog, RawEvmReceipt, RawEvmTransaction
from txscope.core.errors import InvalidReference, NotFound
from txscope.core.models import (
    ChainDescriptor,
    ChainKind,
    EvmTransactionAnalysis,
    TokenTransfer,
    TransactionStatus,
)
from txscope.core.registry import ChainRegistry
from txscope.ports.transaction_source_port import EvmTransactionSourcePort

logger = logging.getLogger(__name__)


# keccak256("Transfer(address,address,uint256)")
TRANSFER_EVENT_SIGNATURE = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"

_HASH_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


def parse_tx_hash(tx_reference: str) -> str:
    ref = (tx_reference or "").strip()
    if not _HASH_RE.match(ref):
        raise InvalidReference(f"Invalid transaction hash: {tx_reference!r}")
    if ref[:2].lower() == "0x":
        ref = ref[2:]
    return "0x" + ref.lower()


def canonical_address(address: str) -> str:
    a = (address or "").strip().lower()
    if not a.startswith("0x"):
        a = "0x" + a
    return a


def _hex_bytes(value: str) -> bytes:
    s = (value or "").strip()
    if s[:2].lower() == "0x":
        s = s[2:]
    if len(s) % 2:
        s = "0" + s
    return bytes.fromhex(s)


def topic_to_address(topic: str) -> str:
    """Lower 20 bytes of a 32-byte indexed topic, as a canonical address."""
    raw = _hex_bytes(topic)
    if len(raw) != 32:
        raise ValueError(f"topic must be 32 bytes, got {len(raw)}")
    return "0x" + raw[12:].hex()


def compute_fee(gas_used: Optional[int], gas_price: Optional[int]) -> Optional[int]:
    if gas_used is None or gas_price is None:
        return None
    return gas_used * gas_price


def derive_status(receipt: Optional[RawEvmReceipt]) -> TransactionStatus:
    if receipt is None:
        return TransactionStatus.PENDING
    if receipt.status == 1:
        return TransactionStatus.SUCCESS
    return TransactionStatus.FAILED


def decode_transfer(log: RawEvmLog) -> Optional[TokenTransfer]:
    """
    Decode an ERC-20 ``Transfer`` log, or return None when the entry is not one.

    Needs at least three topics with topic[0] equal to the event signature.
    The amount is the first 32 bytes of ``data`` read big-endian, zero when
    the payload is shorter.
    """
    topics = log.topics
    if len(topics) < 3 or (topics[0] or "").lower() != TRANSFER_EVENT_SIGNATURE:
        return None

    from_address = topic_to_address(topics[1])
    to_address = topic_to_address(topics[2])

    data = _hex_bytes(log.data)
    amount = int.from_bytes(data[:32], "big") if len(data) >= 32 else 0

    return TokenTransfer(
        token_address=canonical_address(log.address),
        from_address=from_address,
        to_address=to_address,
        amount=amount,
    )


def extract_transfers(logs: Iterable[RawEvmLog], tx_sender: str) -> List[TokenTransfer]:
    # only transfers moved directly by the sender are kept
    sender = canonical_address(tx_sender)
    out: List[TokenTransfer] = []
    for log in logs:
        try:
            t = decode_transfer(log)
        except ValueError as e:
            logger.debug("skipping undecodable log from %s: %s", log.address, e)
            continue
        if t is not None and t.from_address == sender:
            out.append(t)
    return out


class EvmAnalyzer:
    """
    Explains a single EVM transaction: fee, settlement status and the
    ERC-20 transfers sent by its sender.
    """

    def __init__(self, registry: ChainRegistry, source: EvmTransactionSourcePort) -> None:
        self.registry = registry
        self.source = source

    def analyze(self, chain_key: str, tx_reference: str) -> EvmTransactionAnalysis:
        chain = self.registry.resolve_kind(chain_key, ChainKind.EVM)
        tx_hash = parse_tx_hash(tx_reference)

        logger.info("analyzing %s transaction %s", chain.key, tx_hash)

        tx = self.source.get_transaction(chain, tx_hash)
        if tx is None:
            raise NotFound(f"Transaction not found: {tx_hash}")

        # no receipt yet = not settled, which is not an error
        receipt = self.source.get_receipt(chain, tx_hash)

        analysis = self.derive(chain, tx_hash, tx, receipt)
        logger.info("%s on %s: status=%s transfers=%d", tx_hash, chain.key,
                    analysis.transaction_status.value, len(analysis.erc20_transfers))
        return analysis

    @staticmethod
    def derive(
        chain: ChainDescriptor,
        tx_hash: str,
        tx: RawEvmTransaction,
        receipt: Optional[RawEvmReceipt],
    ) -> EvmTransactionAnalysis:
        gas_used = receipt.gas_used if receipt is not None else None
        block_number = receipt.block_number if receipt is not None else None
        transfers = extract_transfers(receipt.logs, tx.from_address) if receipt is not None else []

        return EvmTransactionAnalysis(
            tx_hash=tx_hash,
            chain_name=chain.name,
            gas_used=gas_used,
            gas_price=tx.gas_price,
            gas_limit=tx.gas_limit,
            transaction_fee=compute_fee(gas_used, tx.gas_price),
            erc20_transfers=transfers,
            transaction_status=derive_status(receipt),
            block_number=block_number,
            from_address=canonical_address(tx.from_address),
            to_address=canonical_address(tx.to_address) if tx.to_address else None,
            value=tx.value_wei,
            chain_id=chain.chain_id if isinstance(chain.chain_id, int) else None,
            native_token=chain.native_token,
        )

    def explorer_link(self, chain_key: str, tx_reference: str) -> str:
        chain = self.registry.resolve_kind(chain_key, ChainKind.EVM)
        return f"{chain.explorer_url.rstrip('/')}/tx/{parse_tx_hash(tx_reference)}"
