"""
Logging and per-set outcome reporting.
"""
