"""
Data models and payload handling module.

Immutable value types for windows and allocation results, plus helpers that
read windows out of raw time-keyed stream payloads.
"""
