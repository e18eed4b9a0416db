ALL_NETWORKS = [
    "mainnet-beta",
    "testnet",
    "devnet",
]

# Public keys
DUMMY_VOTE_ACCOUNT = "Vote111111111111111111111111111111111111111"
DUMMY_IDENTITY = "Stake11111111111111111111111111111111111111"
OTHER_VOTE_ACCOUNT = "Config1111111111111111111111111111111111111"

MAINNET_SLOTS_PER_EPOCH = 432_000
