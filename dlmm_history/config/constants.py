"""Generation constants for the DLMM historical data simulator"""

# Interval durations in milliseconds
INTERVAL_MS = {
    "1m": 60 * 1000,
    "5m": 5 * 60 * 1000,
    "15m": 15 * 60 * 1000,
    "1h": 60 * 60 * 1000,
    "4h": 4 * 60 * 60 * 1000,
    "1d": 24 * 60 * 60 * 1000,
}
DEFAULT_INTERVAL = "1h"
DAY_MS = INTERVAL_MS["1d"]

# Per-interval volatility ranges (low, high) as a fraction of price
VOLATILITY_RANGES = {
    "1m": (0.001, 0.004),    # 0.1-0.4% per minute
    "5m": (0.003, 0.010),    # 0.3-1% per 5 minutes
    "15m": (0.005, 0.020),   # 0.5-2% per 15 minutes
    "1h": (0.010, 0.040),    # 1-4% per hour
    "4h": (0.020, 0.070),    # 2-7% per 4 hours
    "1d": (0.020, 0.100),    # 2-10% per day
}

# Per-interval base volume ranges in quote units
BASE_VOLUME_RANGES = {
    "1m": (1_000, 5_000),
    "5m": (5_000, 20_000),
    "15m": (15_000, 50_000),
    "1h": (50_000, 200_000),
    "4h": (200_000, 1_000_000),
    "1d": (1_000_000, 5_000_000),
}

# Seed price range
SEED_PRICE_MIN = 100.0
SEED_PRICE_MAX = 1000.0

# Random walk
REGIME_SWITCH_PROBABILITY = 0.02   # 2% chance of regime switch per step
TREND_BIAS_RANGE = 0.0005          # Subtle drift, +/- half of this
MEAN_REVERSION_SPEED = 0.05        # Fraction of the gap to the seed price closed per step
MAX_STEP_CHANGE = 0.05             # |close/open - 1| never exceeds 5%

# Candle wicks
WICK_VOLATILITY_FACTOR = 0.3
MAX_WICK_RATIO = 0.015             # Each wick at most 1.5% of close

# Volume
VOLUME_MOVE_SENSITIVITY = 20       # 1% move => +20% volume
VOLUME_SPLIT_RANGE = (0.4, 0.6)    # Share of volume attributed to token X

# Liquidity bins
DEFAULT_BIN_STEP_BPS = 25
DEFAULT_ACTIVE_BIN_RANGE = 20
MAX_ACTIVE_BIN_RANGE = 100         # Decayed edge liquidity stays well above MIN_BIN_LIQUIDITY
MIN_BIN_LIQUIDITY = 1e-6           # Smallest value a 6-decimal string can carry
ACTIVE_BIN_DISTANCE = 2            # |offset| <= 2 => 5 active bins
BIN_LIQUIDITY_RANGE = (50_000, 250_000)
LIQUIDITY_DECAY = 0.1
UTILIZATION_DECAY = 0.15
DEFAULT_BASE_FEE_RATE = 0.003      # 0.3%
FEE_DISTANCE_FACTOR = 0.1
MAX_FEE_RATE = 0.1

# Cache sizing estimates (bytes)
PRICE_POINT_BYTES = 200
LIQUIDITY_POINT_BYTES = 150

# Placeholder pools warmed by preload (SOL/USDC, ETH/USDC)
COMMON_POOL_ADDRESSES = (
    "11111111111111111111111111111112",
    "22222222222222222222222222222222",
)
