"""Ledger constants and defaults."""

DEFAULT_CIVIL_TIMEZONE = "America/Sao_Paulo"

PROTOCOL_PREFIX = "KL-"
PROTOCOL_HASH_LENGTH = 12
PROTOCOL_LOOKBACK_MONTHS = 36

# Indexed by weekday with Sunday = 0.
WEEKDAY_LABELS = ("Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb")

TIME_FORMAT = "%H:%M"
PERIOD_FORMAT = "{year:04d}-{month:02d}"
MIN_PERIOD_YEAR = 1900
MAX_PERIOD_YEAR = 9998
