"""All Trillium reward API fetching is defined here in the TrilliumClient class"""

from __future__ import annotations

import math
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import requests

from validator_economics.constants import (
    COMMISSION_DENOMINATOR,
    MEV_COMMISSION_DENOMINATOR,
)
from validator_economics.logger import set_log
from validator_economics.models.rewards import EpochRewardRecord
from validator_economics.models.warning import ReportWarning, WarningKind

log = set_log(__name__)

TrilliumRow = dict[str, Any]


class SourceFetchError(RuntimeError):
    """A single request against the reward provider failed"""


@dataclass(frozen=True)
class BulkResult:
    """Outcome of the bulk history request: either rows or the reason it failed"""

    rows: Optional[list[TrilliumRow]] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        """The bulk history is usable"""
        return self.failure is None


@dataclass
class RewardFetchResult:
    """Records found for an epoch range plus the warnings collected on the way"""

    records: list[EpochRewardRecord] = field(default_factory=list)
    warnings: list[ReportWarning] = field(default_factory=list)


def _amount(row: TrilliumRow, key: str) -> float:
    """Non-negative finite amount, missing or null counts as zero"""
    value = row.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{key} is not numeric: {value!r}")
    amount = float(value)
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"{key} must be finite and non-negative, got {value!r}")
    return amount


def _rate(row: TrilliumRow, key: str, denominator: int) -> float:
    rate = _amount(row, key) / denominator
    if rate > 1:
        raise ValueError(f"{key} exceeds 100%: {row.get(key)!r}")
    return rate


def _epoch(row: TrilliumRow) -> int:
    raw = row.get("epoch")
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"invalid epoch {raw!r}")
    if isinstance(raw, float) and not math.isfinite(raw):
        raise ValueError(f"invalid epoch {raw!r}")
    epoch = int(raw)
    if epoch < 0 or epoch != float(raw):
        raise ValueError(f"invalid epoch {raw!r}")
    return epoch


def parse_record(row: TrilliumRow) -> EpochRewardRecord:
    """
    Converts a Trillium validator_rewards row into a record.
    Commission is reported in percent, MEV commission in basis points.
    Raises ValueError on malformed values.
    """
    return EpochRewardRecord(
        epoch=_epoch(row),
        vote_reward=_amount(row, "total_inflation_reward"),
        jito_tips=_amount(row, "mev_earned"),
        block_reward=_amount(row, "rewards"),
        vote_cost=_amount(row, "vote_cost"),
        commission_rate=_rate(row, "commission", COMMISSION_DENOMINATOR),
        mev_commission_rate=_rate(row, "mev_commission", MEV_COMMISSION_DENOMINATOR),
    )


class TrilliumClient:
    """
    Reward source combining Trillium's per-validator history endpoint (one
    request, recent epochs only) with its per-epoch endpoint (one request per
    epoch, full validator set) for everything the history does not cover.
    """

    api_url: str
    timeout: float
    max_workers: int
    session: requests.Session

    def __init__(
        self,
        api_url: str,
        timeout: float = 30,
        max_workers: int = 4,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.max_workers = max_workers
        self.session = session or requests.Session()

    def _get_json(self, url: str) -> Any:
        """Internally every provider request is routed through here."""
        log.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as err:
            raise SourceFetchError(f"request to {url} failed: {err}") from err

    def get_validator_history(self, vote_account: str) -> BulkResult:
        """Full reward history of one vote account"""
        url = f"{self.api_url}/validator_rewards/{vote_account}"
        try:
            rows = self._get_json(url)
        except SourceFetchError as err:
            return BulkResult(failure=str(err))
        if not isinstance(rows, list):
            return BulkResult(failure=f"unexpected response from {url}: {rows!r:.200}")
        return BulkResult(rows=rows)

    def get_epoch_rewards(self, epoch: int) -> list[TrilliumRow]:
        """Rewards of every validator in `epoch`"""
        url = f"{self.api_url}/validator_rewards/{epoch}"
        rows = self._get_json(url)
        if not isinstance(rows, list):
            raise SourceFetchError(f"unexpected response from {url}: {rows!r:.200}")
        return rows

    def fetch_epoch(self, vote_account: str, epoch: int) -> EpochRewardRecord | None:
        """
        Record of `vote_account` in `epoch` from the per-epoch endpoint,
        None when the provider has no entry for it.
        """
        for row in self.get_epoch_rewards(epoch):
            if isinstance(row, dict) and row.get("vote_account_pubkey") == vote_account:
                record = parse_record(row)
                if record.epoch != epoch:
                    raise ValueError(f"entry reports epoch {record.epoch}")
                return record
        return None

    def _fetch_epoch_or_warn(
        self,
        vote_account: str,
        epoch: int,
        cancel_event: Optional[threading.Event],
    ) -> EpochRewardRecord | ReportWarning | None:
        if cancel_event is not None and cancel_event.is_set():
            return ReportWarning(WarningKind.CANCELLED, "run cancelled", epoch)
        try:
            return self.fetch_epoch(vote_account, epoch)
        except SourceFetchError as err:
            log.warning(f"Skipping epoch {epoch}: {err}")
            return ReportWarning(WarningKind.SOURCE_FETCH_ERROR, str(err), epoch)
        except ValueError as err:
            log.warning(f"Rejecting malformed record for epoch {epoch}: {err}")
            return ReportWarning(WarningKind.MALFORMED_RECORD, str(err), epoch)

    def fetch_epochs(
        self,
        vote_account: str,
        epochs: Iterable[int],
        cancel_event: Optional[threading.Event] = None,
    ) -> RewardFetchResult:
        """
        Per-epoch requests for `epochs`, issued concurrently on a bounded pool.
        Failing epochs become warnings, the rest of the range is unaffected.
        """
        epochs = sorted(set(epochs))
        result = RewardFetchResult()
        if not epochs:
            return result
        log.info(
            f"Fetching {len(epochs)} epochs individually "
            f"({epochs[0]} to {epochs[-1]}) with {self.max_workers} workers"
        )
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(
                    self._fetch_epoch_or_warn, vote_account, epoch, cancel_event
                ): epoch
                for epoch in epochs
            }
            try:
                for future in as_completed(futures):
                    outcome = future.result()
                    if isinstance(outcome, EpochRewardRecord):
                        result.records.append(outcome)
                    elif isinstance(outcome, ReportWarning):
                        result.warnings.append(outcome)
                    else:
                        log.debug(
                            f"No entry for {vote_account} in epoch {futures[future]}"
                        )
            except KeyboardInterrupt:
                log.warning("Interrupted, cancelling outstanding per-epoch requests")
                if cancel_event is not None:
                    cancel_event.set()
                executor.shutdown(wait=False, cancel_futures=True)
                raise
        result.records.sort(key=lambda r: r.epoch)
        result.warnings.sort(key=ReportWarning.sort_key)
        return result

    def fetch_rewards(
        self,
        vote_account: str,
        start_epoch: int,
        end_epoch: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> RewardFetchResult:
        """
        Records of `vote_account` for epochs in [start_epoch, end_epoch).

        The bulk history is used for the epochs it contains; epochs before its
        earliest entry are gap-filled from the per-epoch endpoint. If the bulk
        request fails the whole range is fetched per epoch.
        """
        result = RewardFetchResult()
        if end_epoch <= start_epoch:
            return result

        bulk = self.get_validator_history(vote_account)
        if not bulk.ok:
            log.warning(
                f"Bulk history unavailable ({bulk.failure}), "
                f"falling back to per-epoch requests for {start_epoch} to {end_epoch}"
            )
            result.warnings.append(
                ReportWarning(
                    WarningKind.BULK_SOURCE_FAILURE,
                    f"bulk history unavailable, fetched every epoch individually: "
                    f"{bulk.failure}",
                )
            )
            gap_epochs: list[int] = list(range(start_epoch, end_epoch))
            bulk_records: dict[int, EpochRewardRecord] = {}
        else:
            assert bulk.rows is not None
            bulk_records, earliest, bulk_warnings = self._parse_history(
                bulk.rows, start_epoch, end_epoch
            )
            result.warnings.extend(bulk_warnings)
            gap_end = min(earliest if earliest is not None else end_epoch, end_epoch)
            gap_epochs = [
                epoch
                for epoch in range(start_epoch, gap_end)
                if epoch not in bulk_records
            ]
            log.info(
                f"Bulk history covers {len(bulk_records)} epochs in range, "
                f"{len(gap_epochs)} earlier epochs to gap-fill"
            )

        gap_fill = self.fetch_epochs(vote_account, gap_epochs, cancel_event)
        records = dict(bulk_records)
        records.update({record.epoch: record for record in gap_fill.records})
        result.records = [records[epoch] for epoch in sorted(records)]
        result.warnings.extend(gap_fill.warnings)
        result.warnings.sort(key=ReportWarning.sort_key)
        return result

    @staticmethod
    def _parse_history(
        rows: list[TrilliumRow], start_epoch: int, end_epoch: int
    ) -> tuple[dict[int, EpochRewardRecord], int | None, list[ReportWarning]]:
        """In-range records by epoch, earliest epoch of the whole history, warnings"""
        records: dict[int, EpochRewardRecord] = {}
        warnings: list[ReportWarning] = []
        earliest: int | None = None
        for row in rows:
            if not isinstance(row, dict):
                warnings.append(
                    ReportWarning(WarningKind.MALFORMED_RECORD, f"invalid row {row!r}")
                )
                continue
            try:
                epoch = _epoch(row)
            except ValueError as err:
                warnings.append(ReportWarning(WarningKind.MALFORMED_RECORD, str(err)))
                continue
            earliest = epoch if earliest is None else min(earliest, epoch)
            if not start_epoch <= epoch < end_epoch:
                continue
            try:
                record = parse_record(row)
            except ValueError as err:
                log.warning(f"Rejecting malformed record for epoch {epoch}: {err}")
                warnings.append(
                    ReportWarning(WarningKind.MALFORMED_RECORD, str(err), epoch)
                )
                continue
            if epoch in records:
                log.warning(f"Duplicate history entry for epoch {epoch}, keeping first")
                continue
            records[epoch] = record
        return records, earliest, warnings
