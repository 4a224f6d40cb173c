"""Centralized constants for the ril application.

Storage keys and timing defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Durable storage ----------
COMPLETED_KEY = "ril-completed"
TIMES_KEY = "ril-times"

# ---------- Filtering ----------
ALL = "All"

# ---------- Practice timer ----------
TICK_INTERVAL = 1.0  # seconds

# ---------- Display ----------
DESCRIPTION_PREVIEW_LEN = 120
