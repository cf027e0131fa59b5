"""
Solana JSON-RPC account source.

Responsibilities:
- getProgramAccounts with dataSize / memcmp filters (base64 account data).
- getAccountInfo for a single address.
- Retry HTTP 429 and transport failures with exponential backoff; raise
  AccountSourceError once retries are exhausted or the RPC reports an error.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

import httpx
from solders.pubkey import Pubkey

from vsr_governance.account_source.base import get_token_owner_record_address
from vsr_governance.account_source.models import (
    MemcmpFilter,
    RawAccount,
    raw_bytes_from_account_data,
)
from vsr_governance.config import GovernanceSettings, get_settings
from vsr_governance.core.exceptions import AccountSourceError
from vsr_governance.vsr_logging import get_logger

logger = get_logger(__name__)

# JSON-RPC request id counter
_request_id = 0


def _next_id() -> int:
    global _request_id
    _request_id += 1
    return _request_id


def _build_rpc_body(method: str, params: list[Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": _next_id(), "method": method, "params": params}


class SolanaAccountSource:
    """
    Account source backed by a Solana RPC endpoint.

    Use as an async context manager, or call aclose() when done. An existing
    httpx.AsyncClient may be passed in (it is then not closed by this object).
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = 30.0,
        max_retries: int = 3,
        retry_backoff_sec: float = 1.0,
        commitment: str = "confirmed",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._rpc_url = rpc_url.strip()
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff_sec
        self._commitment = commitment
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_sec))

    @classmethod
    def from_settings(cls, settings: GovernanceSettings | None = None) -> "SolanaAccountSource":
        settings = settings or get_settings()
        return cls(
            settings.solana_rpc_url,
            timeout_sec=settings.rpc_timeout_sec,
            max_retries=settings.rpc_max_retries,
            retry_backoff_sec=settings.rpc_retry_backoff_sec,
            commitment=settings.rpc_commitment,
        )

    async def __aenter__(self) -> "SolanaAccountSource":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def get_program_accounts(
        self,
        program_id: Pubkey,
        *,
        data_size: int | None = None,
        memcmp: Sequence[MemcmpFilter] = (),
    ) -> list[RawAccount]:
        filters: list[dict[str, Any]] = []
        if data_size is not None:
            filters.append({"dataSize": data_size})
        filters.extend(f.to_rpc() for f in memcmp)
        config: dict[str, Any] = {"encoding": "base64", "commitment": self._commitment}
        if filters:
            config["filters"] = filters

        result = await self._rpc("getProgramAccounts", [str(program_id), config])
        if not isinstance(result, list):
            raise AccountSourceError(
                "getProgramAccounts returned a non-list result", method="getProgramAccounts"
            )
        accounts: list[RawAccount] = []
        for item in result:
            try:
                accounts.append(RawAccount.from_rpc_item(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(
                    "program_account_item_skipped",
                    program_id=str(program_id),
                    error=str(e),
                )
        logger.debug(
            "program_accounts_fetched",
            program_id=str(program_id),
            data_size=data_size,
            memcmp_count=len(memcmp),
            account_count=len(accounts),
        )
        return accounts

    async def get_account(self, address: Pubkey) -> RawAccount | None:
        result = await self._rpc(
            "getAccountInfo",
            [str(address), {"encoding": "base64", "commitment": self._commitment}],
        )
        value = (result or {}).get("value") if isinstance(result, dict) else None
        if value is None:
            return None
        try:
            return RawAccount(address=address, data=raw_bytes_from_account_data(value["data"]))
        except (KeyError, TypeError, ValueError) as e:
            raise AccountSourceError(
                f"Malformed getAccountInfo value for {address}: {e}", method="getAccountInfo"
            ) from e

    def derive_record_address(
        self,
        program_id: Pubkey,
        realm: Pubkey,
        mint: Pubkey,
        owner: Pubkey,
    ) -> Pubkey:
        return get_token_owner_record_address(program_id, realm, mint, owner)

    async def _rpc(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call with retry; raise AccountSourceError on failure."""
        body = _build_rpc_body(method, params)
        delay = self._retry_backoff
        last_error: str = "no attempt made"

        for attempt in range(self._max_retries):
            try:
                resp = await self._client.post(self._rpc_url, json=body)
            except httpx.TransportError as e:
                last_error = f"{type(e).__name__}: {e}"
            else:
                if resp.status_code == 429:
                    last_error = "HTTP 429 rate limited"
                elif resp.status_code >= 400:
                    raise AccountSourceError(
                        f"Solana RPC HTTP {resp.status_code}: {resp.text[:200]}",
                        method=method,
                        status_code=resp.status_code,
                    )
                else:
                    return self._unwrap(method, resp)

            logger.warning(
                "rpc_retry",
                method=method,
                attempt=attempt + 1,
                max_retries=self._max_retries,
                error=last_error,
            )
            if attempt + 1 < self._max_retries:
                await asyncio.sleep(delay)
                delay *= 2

        logger.error("rpc_give_up", method=method, max_retries=self._max_retries, error=last_error)
        raise AccountSourceError(f"Solana RPC exhausted for {method}: {last_error}", method=method)

    @staticmethod
    def _unwrap(method: str, resp: httpx.Response) -> Any:
        try:
            data = resp.json()
        except ValueError as e:
            raise AccountSourceError(f"Solana RPC returned invalid JSON: {e}", method=method) from e
        if "error" in data:
            err = data["error"]
            message = err.get("message", err) if isinstance(err, dict) else err
            code = err.get("code") if isinstance(err, dict) else None
            raise AccountSourceError(f"Solana RPC error: {message} (code={code})", method=method)
        if "result" not in data:
            raise AccountSourceError("Solana RPC returned no result", method=method)
        return data["result"]
