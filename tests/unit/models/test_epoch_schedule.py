import unittest

import pytest

from validator_economics.models.epoch_schedule import EpochSchedule
from tests.constants import MAINNET_SLOTS_PER_EPOCH

WARMUP = EpochSchedule(
    slots_per_epoch=8192,
    warmup=True,
    first_normal_epoch=8,
    first_normal_slot=8160,
)
MAINNET = EpochSchedule(
    slots_per_epoch=MAINNET_SLOTS_PER_EPOCH,
    warmup=False,
    first_normal_epoch=0,
    first_normal_slot=0,
)


class TestEpochSchedule(unittest.TestCase):
    def test_from_rpc(self):
        schedule = EpochSchedule.from_rpc(
            {
                "firstNormalEpoch": 0,
                "firstNormalSlot": 0,
                "leaderScheduleSlotOffset": 432000,
                "slotsPerEpoch": 432000,
                "warmup": False,
            }
        )
        self.assertEqual(schedule, MAINNET)

    def test_warmup_epochs_double(self):
        self.assertEqual(WARMUP.get_slots_in_epoch(0), 32)
        self.assertEqual(WARMUP.get_slots_in_epoch(1), 64)
        self.assertEqual(WARMUP.get_slots_in_epoch(7), 4096)
        self.assertEqual(WARMUP.get_slots_in_epoch(8), 8192)
        self.assertEqual(WARMUP.get_slots_in_epoch(100), 8192)

    def test_warmup_epoch_boundaries(self):
        self.assertEqual(WARMUP.get_epoch_and_slot_index(0), (0, 0))
        self.assertEqual(WARMUP.get_epoch_and_slot_index(31), (0, 31))
        self.assertEqual(WARMUP.get_epoch_and_slot_index(32), (1, 0))
        self.assertEqual(WARMUP.get_epoch_and_slot_index(95), (1, 63))
        self.assertEqual(WARMUP.get_epoch_and_slot_index(96), (2, 0))
        self.assertEqual(WARMUP.get_epoch_and_slot_index(8159), (7, 4095))
        self.assertEqual(WARMUP.get_epoch_and_slot_index(8160), (8, 0))
        self.assertEqual(WARMUP.get_epoch_and_slot_index(8160 + 8192), (9, 0))

    def test_first_slot_is_inverse_of_epoch(self):
        for schedule in [WARMUP, MAINNET]:
            for epoch in range(0, 20):
                first_slot = schedule.get_first_slot_in_epoch(epoch)
                self.assertEqual(schedule.get_epoch_and_slot_index(first_slot), (epoch, 0))
                if first_slot > 0:
                    self.assertEqual(schedule.get_epoch(first_slot - 1), epoch - 1)

    def test_mainnet_epochs_are_uniform(self):
        self.assertEqual(MAINNET.get_epoch(0), 0)
        self.assertEqual(MAINNET.get_epoch(431_999), 0)
        self.assertEqual(MAINNET.get_epoch(432_000), 1)
        self.assertEqual(
            MAINNET.get_epoch_and_slot_index(700 * MAINNET_SLOTS_PER_EPOCH + 1000),
            (700, 1000),
        )


def test_negative_slot_is_rejected():
    with pytest.raises(ValueError):
        MAINNET.get_epoch(-1)
