from __future__ import annotations

from typing import Any, Dict, Optional

from txscope.adapters.source.json_rpc import JsonRpcAdapter
from txscope.core.dto import RawEvmLog, RawEvmReceipt, RawEvmTransaction
from txscope.core.errors import SourceUnavailable
from txscope.core.models import ChainDescriptor
from txscope.ports.transaction_source_port import EvmTransactionSourcePort


def _qty(value: Any) -> Optional[int]:
    # JSON-RPC quantities are 0x-prefixed hex; some providers send ints
    if value is None:
        return None
    if isinstance(value, int):
        return value
    s = str(value).strip()
    if not s:
        return None
    return int(s, 16) if s.lower().startswith("0x") else int(s)


class EvmRpcAdapter(JsonRpcAdapter, EvmTransactionSourcePort):

    # ---------- port methods ----------

    def get_transaction(self, chain: ChainDescriptor, tx_hash: str) -> Optional[RawEvmTransaction]:
        r = self._call(chain.rpc_url, "eth_getTransactionByHash", [tx_hash])
        if r is None:
            return None
        try:
            return self._to_transaction(r)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SourceUnavailable(f"Malformed transaction payload for {tx_hash}: {e}") from e

    def get_receipt(self, chain: ChainDescriptor, tx_hash: str) -> Optional[RawEvmReceipt]:
        r = self._call(chain.rpc_url, "eth_getTransactionReceipt", [tx_hash])
        if r is None:
            return None
        try:
            return self._to_receipt(r)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SourceUnavailable(f"Malformed receipt payload for {tx_hash}: {e}") from e

    # ---------- parsing ----------

    @staticmethod
    def _to_transaction(r: Dict[str, Any]) -> RawEvmTransaction:
        return RawEvmTransaction(
            tx_hash=str(r.get("hash") or "").lower(),
            from_address=str(r["from"]).lower(),
            to_address=str(r["to"]).lower() if r.get("to") else None,
            value_wei=_qty(r.get("value")) or 0,
            gas_limit=_qty(r.get("gas")) or 0,
            gas_price=_qty(r.get("gasPrice")),
        )

    @staticmethod
    def _to_receipt(r: Dict[str, Any]) -> RawEvmReceipt:
        logs = tuple(
            RawEvmLog(
                address=str(lg.get("address") or "").lower(),
                topics=tuple(str(t) for t in (lg.get("topics") or [])),
                data=str(lg.get("data") or "0x"),
            )
            for lg in (r.get("logs") or [])
        )
        return RawEvmReceipt(
            status=_qty(r.get("status")),
            gas_used=_qty(r.get("gasUsed")),
            block_number=_qty(r.get("blockNumber")),
            logs=logs,
        )
