"""
Resolves the epoch covering a given date by extrapolating slots from a recent
(slot, block time) observation.
"""
import math
from datetime import datetime
from typing import Callable

from validator_economics.logger import set_log

log = set_log(__name__)


class ResolutionError(RuntimeError):
    """The epoch of a date could not be determined. Fatal to the run."""


def estimate_slot(
    target_date: datetime,
    reference_slot: int,
    reference_timestamp: float,
    seconds_per_slot: float,
) -> int:
    """
    Linear slot estimate for `target_date` given that `reference_slot` was
    produced at unix time `reference_timestamp`. Never below the genesis slot.
    """
    if seconds_per_slot <= 0:
        raise ValueError(f"seconds_per_slot must be positive, got {seconds_per_slot}")
    seconds_difference = target_date.timestamp() - reference_timestamp
    return max(0, reference_slot + math.floor(seconds_difference / seconds_per_slot))


def resolve_epoch(
    target_date: datetime,
    reference_slot: int,
    reference_timestamp: float,
    seconds_per_slot: float,
    epoch_of_slot: Callable[[int], int],
) -> int:
    """
    Epoch containing the slot estimated for `target_date`.
    `epoch_of_slot` is the cluster's epoch schedule lookup; epochs are not of
    uniform length in general, so slots are never simply divided here.
    """
    slot = estimate_slot(
        target_date, reference_slot, reference_timestamp, seconds_per_slot
    )
    try:
        epoch = epoch_of_slot(slot)
    except Exception as err:
        raise ResolutionError(
            f"epoch schedule lookup failed for slot {slot} ({target_date})"
        ) from err
    log.debug(f"Resolved {target_date} to slot {slot} in epoch {epoch}")
    return max(0, epoch)
