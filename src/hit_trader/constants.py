import os
from pathlib import Path

# Repository paths
HERE = Path(__file__).parent.resolve()
src_dir = HERE.parent
if (src_dir / "hit_trader").exists() and (src_dir.parent / "config").exists():
    # We are in src/hit_trader
    REPO_ROOT = src_dir.parent
else:
    # Fallback
    REPO_ROOT = Path(os.getcwd())

CONFIG_DIR = REPO_ROOT / "config"
PROFILES_DIR = CONFIG_DIR / "profiles"

# Asset symbols
HIT_SYMBOL = "$HIT"
FAUX_USD_SYMBOL = "FauxUSD"

# Market defaults
INITIAL_PRICE = 420.69
PRICE_HISTORY_LENGTH = 200
MIN_PRICE = 0.01
INITIAL_VOLATILITY = 0.08
MIN_VOLATILITY = 0.02
MAX_VOLATILITY = 0.2
VOLATILITY_STEP = 0.005

# Scheduler cadences (seconds)
PRICE_TICK_INTERVAL = 0.5
STAKE_TICK_INTERVAL = 1.0
AUTO_TRADE_INTERVAL = 1.0

# Starting wallet
STARTING_HIT = 0.0069
STARTING_FAUX_USD = 420.0

DEFAULT_SMA_PERIOD = 20
EVENT_JOURNAL_SIZE = 500
