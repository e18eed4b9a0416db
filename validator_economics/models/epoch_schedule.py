"""
Slot to epoch conversion following the cluster's epoch schedule.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from validator_economics.constants import MINIMUM_SLOTS_PER_EPOCH

# log2(MINIMUM_SLOTS_PER_EPOCH)
_MINIMUM_SLOTS_EXPONENT = MINIMUM_SLOTS_PER_EPOCH.bit_length() - 1


def _log2_ceil(value: int) -> int:
    """Exponent of the smallest power of two >= value (value >= 1)"""
    return (value - 1).bit_length()


@dataclass(frozen=True)
class EpochSchedule:
    """
    Epoch lengths are not uniform: while `warmup` is enabled the first epochs
    start at MINIMUM_SLOTS_PER_EPOCH slots and double until `first_normal_epoch`,
    from then on every epoch has `slots_per_epoch` slots.
    """

    slots_per_epoch: int
    warmup: bool
    first_normal_epoch: int
    first_normal_slot: int

    @classmethod
    def from_rpc(cls, result: dict[str, Any]) -> EpochSchedule:
        """Parses the result of the `getEpochSchedule` JSON-RPC method"""
        return cls(
            slots_per_epoch=int(result["slotsPerEpoch"]),
            warmup=bool(result["warmup"]),
            first_normal_epoch=int(result["firstNormalEpoch"]),
            first_normal_slot=int(result["firstNormalSlot"]),
        )

    def get_slots_in_epoch(self, epoch: int) -> int:
        """Number of slots in `epoch`"""
        if epoch < self.first_normal_epoch:
            return 2 ** (epoch + _MINIMUM_SLOTS_EXPONENT)
        return self.slots_per_epoch

    def get_epoch_and_slot_index(self, slot: int) -> tuple[int, int]:
        """Returns the epoch containing `slot` and the offset of `slot` inside it"""
        if slot < 0:
            raise ValueError(f"slot must be non-negative, got {slot}")
        if slot < self.first_normal_slot:
            epoch = (
                _log2_ceil(slot + MINIMUM_SLOTS_PER_EPOCH + 1)
                - _MINIMUM_SLOTS_EXPONENT
                - 1
            )
            epoch_length = self.get_slots_in_epoch(epoch)
            return epoch, slot - (epoch_length - MINIMUM_SLOTS_PER_EPOCH)

        normal_slot_index = slot - self.first_normal_slot
        normal_epoch_index, slot_index = divmod(normal_slot_index, self.slots_per_epoch)
        return self.first_normal_epoch + normal_epoch_index, slot_index

    def get_epoch(self, slot: int) -> int:
        """Epoch containing `slot`"""
        return self.get_epoch_and_slot_index(slot)[0]

    def get_first_slot_in_epoch(self, epoch: int) -> int:
        """First slot of `epoch`"""
        if epoch <= self.first_normal_epoch:
            return (2**epoch - 1) * MINIMUM_SLOTS_PER_EPOCH
        return (
            epoch - self.first_normal_epoch
        ) * self.slots_per_epoch + self.first_normal_slot
