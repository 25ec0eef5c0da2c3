from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from swapvol.adapters.indexer.throttle import RequestThrottle, backoff_delay
from swapvol.config import settings
from swapvol.core.dto import IndexerStatus, Token, Trade, TradesPage
from swapvol.core.errors import DataSourceError, ParseError, RateLimitError
from swapvol.ports.indexer_port import IndexerPort

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_records(rows: List[Any], parser: Callable[[Any], T], kind: str) -> List[T]:
    out: List[T] = []
    for r in rows:
        try:
            out.append(parser(r))
        except ParseError as e:
            logger.warning("Dropping malformed %s record: %s", kind, e)
    return out


class HttpIndexerAdapter(IndexerPort):

    def __init__(
        self,
        base_url: str = settings.INDEXER_BASE_URL,
        requests_per_sec: float = settings.INDEXER_REQUESTS_PER_SEC,
        timeout_sec: int = settings.INDEXER_TIMEOUT_SEC,
        max_retries: int = settings.INDEXER_MAX_RETRIES,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_sec
        self._max_retries = max(1, max_retries)
        self._sleep = sleep
        self._throttle = RequestThrottle(requests_per_sec, sleep=sleep)
        self._session = session or requests.Session()

    # ---------- internal ----------

    def _call(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self._base_url}/{path.lstrip('/')}"
        last_err: Optional[Exception] = None

        for attempt in range(self._max_retries):
            try:
                self._throttle.wait()
                resp = self._session.get(url, params=params, timeout=self._timeout)
                if resp.status_code == 429:
                    raise RateLimitError(f"Rate limited by indexer: {url}")
                resp.raise_for_status()
                return resp.json()
            except (requests.RequestException, ValueError, RateLimitError) as e:
                last_err = e
                logger.warning(
                    "Indexer call %s failed (attempt %d/%d): %s",
                    path,
                    attempt + 1,
                    self._max_retries,
                    e,
                )
                if attempt + 1 < self._max_retries:
                    self._sleep(backoff_delay(attempt))

        raise DataSourceError(f"Indexer {path} failed after retries: {last_err}")

    # ---------- port methods ----------

    def get_tokens(self) -> List[Token]:
        data = self._call("tokens")
        if not isinstance(data, list):
            raise DataSourceError(f"Invalid token list: {data!r}")
        return parse_records(data, Token.from_record, "token")

    def get_status(self) -> IndexerStatus:
        data = self._call("status")
        try:
            indexed_till = data["indexed_till"]
        except (KeyError, TypeError) as e:
            raise DataSourceError(f"Invalid status result: {data!r}") from e
        if isinstance(indexed_till, bool) or not isinstance(indexed_till, int):
            raise DataSourceError(f"Invalid indexed_till: {indexed_till!r}")
        return IndexerStatus(indexed_till=indexed_till)

    def get_trades(
        self,
        block_start: int,
        block_stop: int,
        contract_address: Optional[str] = None,
    ) -> TradesPage:
        params: Dict[str, Any] = {
            "block_start": block_start,
            "block_stop": block_stop,
        }
        if contract_address:
            params["contract_address"] = contract_address

        data = self._call("trades", params)
        if not isinstance(data, dict) or not isinstance(data.get("data"), list):
            raise DataSourceError(f"Invalid trades result: {data!r}")

        is_complete = bool(data.get("is_complete", True))
        if not is_complete:
            logger.info("Indexer returned a partial trade set for blocks %d-%d", block_start, block_stop)

        return TradesPage(
            data=parse_records(data["data"], Trade.from_record, "trade"),
            is_complete=is_complete,
        )
