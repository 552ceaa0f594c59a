"""
Utility functions module.

Common utility functions for day arithmetic shared across the system.

Time Semantics:
- UTC is the single reference zone; naive datetimes are read as UTC
- A day spans 00:00:00.000 to 23:59:59.999 in that zone
- "today" is always the end of the current reference day
"""
