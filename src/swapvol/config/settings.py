import os
from dotenv import load_dotenv
load_dotenv()
# ---- Indexer ----
INDEXER_BASE_URL = os.environ.get("SWAPVOL_INDEXER_URL", "https://common-indexer.azero-tools.com")
INDEXER_REQUESTS_PER_SEC = float(os.environ.get("SWAPVOL_REQUESTS_PER_SEC", "2.0"))
INDEXER_TIMEOUT_SEC = int(os.environ.get("SWAPVOL_TIMEOUT_SEC", "15"))
INDEXER_MAX_RETRIES = int(os.environ.get("SWAPVOL_MAX_RETRIES", "3"))

# ---- Query window ----
# blocks before the indexer head (one day at one block per second)
TRADE_WINDOW_BLOCKS = int(os.environ.get("SWAPVOL_WINDOW_BLOCKS", str(60 * 60 * 24)))

# ---- Display precision ----
AMOUNT_FRACTION_DIGITS = 3      # truncated
VOLUME_FRACTION_DIGITS = 3      # rounded half-up
