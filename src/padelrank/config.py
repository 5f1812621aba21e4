# src/padelrank/config.py

"""Runtime configuration read from environment variables."""

import os

# Glicko-2 system constant. Constrains the change in volatility per period;
# typical values are between 0.3 and 1.2.
TAU = float(os.getenv("PADELRANK_TAU", "0.5"))

# Convergence tolerance for the volatility solver.
EPSILON = float(os.getenv("PADELRANK_EPSILON", "0.000001"))

# Upper bound on solver iterations before giving up.
MAX_ITERATIONS = int(os.getenv("PADELRANK_MAX_ITERATIONS", "100"))

# Values assumed for a profile with no stored rating.
DEFAULT_RATING = float(os.getenv("PADELRANK_DEFAULT_RATING", "1500"))
DEFAULT_RD = float(os.getenv("PADELRANK_DEFAULT_RD", "350"))
DEFAULT_VOL = float(os.getenv("PADELRANK_DEFAULT_VOL", "0.06"))

# Match validation window.
DISPUTE_WINDOW_HOURS = int(os.getenv("PADELRANK_DISPUTE_WINDOW_HOURS", "24"))
DISPUTE_THRESHOLD = int(os.getenv("PADELRANK_DISPUTE_THRESHOLD", "2"))
