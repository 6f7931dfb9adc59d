from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional

import requests

from txscope.config.settings import (
    RPC_MAX_RETRIES,
    RPC_REQUESTS_PER_SEC,
    RPC_TIMEOUT_SEC,
)
from txscope.adapters.source.rate_limiter import SimpleRateLimiter, backoff_sleep
from txscope.core.errors import RateLimitError, SourceUnavailable

logger = logging.getLogger(__name__)


class JsonRpcAdapter:
    """
    Shared JSON-RPC 2.0 transport: one pooled session, per-endpoint pacing,
    retries with jittered backoff on transport errors.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = RPC_TIMEOUT_SEC,
        max_retries: int = RPC_MAX_RETRIES,
        requests_per_sec: float = RPC_REQUESTS_PER_SEC,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout
        self._max_retries = max(1, int(max_retries))
        self._requests_per_sec = requests_per_sec
        self._limiters: Dict[str, SimpleRateLimiter] = {}
        self._ids = itertools.count(1)

    # ---------- internal ----------

    def _limiter(self, url: str) -> SimpleRateLimiter:
        rl = self._limiters.get(url)
        if rl is None:
            rl = self._limiters.setdefault(url, SimpleRateLimiter(self._requests_per_sec))
        return rl

    def _backoff(self, attempt: int) -> None:
        # no wait once the last attempt has failed
        if attempt < self._max_retries - 1:
            backoff_sleep(attempt)

    def _call(self, url: str, method: str, params: List[Any]) -> Any:
        if not url:
            raise SourceUnavailable(f"No RPC endpoint configured for {method}")

        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        last_err: Optional[Exception] = None

        for attempt in range(self._max_retries):
            try:
                self._limiter(url).wait()
                resp = self._session.post(url, json=payload, timeout=self._timeout)
                if resp.status_code == 429:
                    last_err = RateLimitError(f"{method}: rate limited by {url}")
                    logger.warning("rate limited on %s (attempt %d)", method, attempt + 1)
                    self._backoff(attempt)
                    continue
                resp.raise_for_status()
                data = resp.json()
            except (requests.RequestException, ValueError) as e:
                last_err = e
                logger.warning("%s failed (attempt %d): %s", method, attempt + 1, e)
                self._backoff(attempt)
                continue

            if not isinstance(data, dict):
                raise SourceUnavailable(f"{method}: unexpected response {data!r}")

            err = data.get("error")
            if err:
                message = err.get("message", err) if isinstance(err, dict) else err
                raise SourceUnavailable(f"{method}: RPC error: {message}")

            return data.get("result")

        if isinstance(last_err, RateLimitError):
            raise last_err
        raise SourceUnavailable(f"{method} failed after retries: {last_err}") from last_err
