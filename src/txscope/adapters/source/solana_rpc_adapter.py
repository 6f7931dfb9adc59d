from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from txscope.adapters.source.json_rpc import JsonRpcAdapter
from txscope.config.settings import SOLANA_COMMITMENT
from txscope.core.dto import RawSolanaMeta, RawSolanaTransaction, RawTokenBalance
from txscope.core.errors import SourceUnavailable
from txscope.core.models import ChainDescriptor
from txscope.ports.transaction_source_port import SolanaTransactionSourcePort

ALLOWED_COMMITMENTS = ("confirmed", "finalized")


class SolanaRpcAdapter(JsonRpcAdapter, SolanaTransactionSourcePort):

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        min_commitment: str = SOLANA_COMMITMENT,
        **kwargs: Any,
    ) -> None:
        super().__init__(session=session, **kwargs)
        if min_commitment not in ALLOWED_COMMITMENTS:
            raise ValueError(f"commitment must be one of {ALLOWED_COMMITMENTS}, got {min_commitment!r}")
        self._commitment = min_commitment

    # ---------- port methods ----------

    def get_transaction(
        self,
        chain: ChainDescriptor,
        signature: str,
        commitment: str = "confirmed",
    ) -> Optional[RawSolanaTransaction]:
        # never weaker than the configured floor
        if commitment not in ALLOWED_COMMITMENTS or self._commitment == "finalized":
            commitment = self._commitment

        r = self._call(
            chain.rpc_url,
            "getTransaction",
            [
                signature,
                {
                    "encoding": "jsonParsed",
                    "commitment": commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )
        if r is None:
            return None
        try:
            return self._to_transaction(signature, r)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SourceUnavailable(f"Malformed transaction payload for {signature}: {e}") from e

    # ---------- parsing ----------

    @classmethod
    def _to_transaction(cls, signature: str, r: Dict[str, Any]) -> RawSolanaTransaction:
        message = (r.get("transaction") or {}).get("message") or {}
        meta_raw = r.get("meta")

        raw_keys = message.get("accountKeys") or []
        keys = cls._account_keys(raw_keys)
        if isinstance(meta_raw, dict) and all(isinstance(k, str) for k in raw_keys):
            # raw encoding lists lookup-table addresses separately
            loaded = meta_raw.get("loadedAddresses") or {}
            keys.extend(loaded.get("writable") or [])
            keys.extend(loaded.get("readonly") or [])

        return RawSolanaTransaction(
            signature=signature,
            slot=int(r["slot"]),
            block_time=r.get("blockTime"),
            account_keys=keys,
            meta=cls._to_meta(meta_raw) if isinstance(meta_raw, dict) else None,
        )

    @staticmethod
    def _account_keys(raw_keys: List[Any]) -> List[str]:
        # jsonParsed gives {"pubkey": ...}; raw json gives plain strings
        out: List[str] = []
        for k in raw_keys:
            if isinstance(k, dict):
                out.append(str(k.get("pubkey") or ""))
            else:
                out.append(str(k))
        return out

    @classmethod
    def _to_meta(cls, m: Dict[str, Any]) -> RawSolanaMeta:
        return RawSolanaMeta(
            err=m.get("err"),
            fee=int(m["fee"]) if m.get("fee") is not None else None,
            pre_balances=[int(b) for b in (m.get("preBalances") or [])],
            post_balances=[int(b) for b in (m.get("postBalances") or [])],
            pre_token_balances=cls._token_balances(m.get("preTokenBalances")),
            post_token_balances=cls._token_balances(m.get("postTokenBalances")),
            compute_units_consumed=m.get("computeUnitsConsumed"),
        )

    @staticmethod
    def _token_balances(raw: Optional[List[Dict[str, Any]]]) -> Optional[List[RawTokenBalance]]:
        if raw is None:
            return None
        out: List[RawTokenBalance] = []
        for b in raw:
            ui = b.get("uiTokenAmount") or {}
            dec = ui.get("decimals")
            out.append(
                RawTokenBalance(
                    account_index=int(b["accountIndex"]),
                    mint=str(b.get("mint") or ""),
                    amount=str(ui.get("amount") or ""),
                    owner=b.get("owner"),
                    decimals=int(dec) if dec is not None else None,
                )
            )
        return out
