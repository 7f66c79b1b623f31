"""
FILE: corkboard/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - CARD_STATUSES / DEFAULT_CARD_STATUS: Card workflow statuses
  - PALETTE_SIMILARITY_THRESHOLD, PALETTE_MIN_QUERY_LENGTH, PALETTE_MIN_ROWS
  - TOAST_* timings
  - DISPATCH_QUEUE_SIZE, LOG_BUFFER_SIZE
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic numbers
"""

# Card status constants
STATUS_ACTIVE = "active"
STATUS_COMPLETE = "complete"
STATUS_STALE = "stale"
CARD_STATUSES = (STATUS_ACTIVE, STATUS_COMPLETE, STATUS_STALE)
DEFAULT_CARD_STATUS = STATUS_ACTIVE

# Command palette
PALETTE_SIMILARITY_THRESHOLD = 0.2
PALETTE_NGRAM_ARITY = 2
PALETTE_MIN_QUERY_LENGTH = 2  # card/board lists stay empty below this
PALETTE_MIN_ROWS = 2
PALETTE_DEFAULT_ROW_BUDGET = 12

# Toasts (milliseconds)
TOAST_FADE_IN_TIME = 200
TOAST_FADE_OUT_TIME = 400
TOAST_DEFAULT_DURATION = 3000

# Event loop
DEFAULT_TICKRATE_MS = 50
DISPATCH_QUEUE_SIZE = 16
LOG_BUFFER_SIZE = 1000

# Saves
SAVE_NAME_PREFIX = "corkboard"
EXPORT_NAME_PREFIX = "corkboard_export"
