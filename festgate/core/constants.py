"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Event types accepted on event creation
EVENT_TYPES = ("hackathon", "sports", "cultural", "technical", "food")

# Team payment states
PAYMENT_STATUSES = ("pending", "completed", "failed")

# Dashboard check-in filter values for team listings
CHECKIN_FILTERS = ("completed", "partial", "none")

# QR Token Configuration
# Canteen tokens look like EVENT:<SLUG>:CANTEEN:<uuid4>
CANTEEN_TOKEN_PREFIX = "EVENT:"
CANTEEN_TOKEN_MARKER = ":CANTEEN:"
# Member tokens end with this many random bytes rendered as hex
MEMBER_TOKEN_RANDOM_BYTES = 4

# Meal type recorded when a counter scan does not name one
DEFAULT_MEAL_TYPE = "general"

# Placeholder used in ledger rows when the scanned token resolves to nobody
UNKNOWN = "Unknown"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# JWT Token Configuration
# Token expiration time in minutes (7 days, a festival weekend plus setup)
ACCESS_TOKEN_EXPIRE_MINUTES = 10080
