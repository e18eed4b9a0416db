"""Minimal Solana JSON-RPC client for the chain timing the reports depend on."""

from __future__ import annotations

import time
from typing import Any, Optional

import requests

from validator_economics.logger import set_log
from validator_economics.models.epoch_schedule import EpochSchedule

log = set_log(__name__)


class RpcError(RuntimeError):
    """JSON-RPC request failed or returned an error object"""


class SolanaRpcClient:
    """
    Wraps the handful of JSON-RPC methods needed to map dates to epochs.
    Every request carries `timeout`; retries are left to the caller.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._request_id = 0

    def _call(self, method: str, params: Optional[list[Any]] = None) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }
        log.debug(f"Calling {method} on {self.url}")
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            response_json = response.json()
        except (requests.RequestException, ValueError) as err:
            raise RpcError(f"RPC request {method} to {self.url} failed: {err}") from err
        if "error" in response_json:
            raise RpcError(f"RPC method {method} failed with {response_json['error']}")
        return response_json.get("result")

    def get_current_epoch(self) -> int:
        """Epoch the cluster is currently in"""
        return int(self._call("getEpochInfo", [{"commitment": "confirmed"}])["epoch"])

    def get_epoch_schedule(self) -> EpochSchedule:
        """The cluster's epoch schedule"""
        return EpochSchedule.from_rpc(self._call("getEpochSchedule"))

    def get_recent_slot_and_timestamp(self) -> tuple[int, float]:
        """
        A recent confirmed slot together with its estimated production time.
        Falls back to the local clock when the node has no block time for it.
        """
        slot = int(self._call("getSlot", [{"commitment": "confirmed"}]))
        block_time = self._call("getBlockTime", [slot])
        if block_time is None:
            log.warning(f"No block time available for slot {slot}, using local clock")
            return slot, float(int(time.time()))
        return slot, float(block_time)
