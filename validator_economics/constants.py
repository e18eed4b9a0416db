"""Project Global Constants. """

from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
LOG_CONFIG_FILE = PROJECT_ROOT / Path("logging.conf")

# Epoch schedule warmup: the first epoch has this many slots and every
# following warmup epoch doubles until `first_normal_epoch` is reached.
MINIMUM_SLOTS_PER_EPOCH = 32

# Trillium reports validator commission in percent and MEV commission in bps.
COMMISSION_DENOMINATOR = 100
MEV_COMMISSION_DENOMINATOR = 10_000

TRILLIUM_API_URL = "https://api.trillium.so"

# CoinPaprika id of the native token
SOL_COIN_ID = "sol-solana"
