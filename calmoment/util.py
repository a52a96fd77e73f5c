"""Utility constants and helpers for calmoment.

Time unit constants represent durations in seconds.
These are the fixed divisors used by Duration and by relative-time bucketing.
"""

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
MONTH = 2592000
QUARTER = 7776000
YEAR = 31536000

# Week length used by fixed-duration (non-calendar) addition. Differs from
# WEEK on purpose; both are public and must not be unified.
FIXED_WEEK = 605800
