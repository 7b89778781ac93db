"""
ibackup-devkit: one-shot maintenance utilities for the ibackup set database.
"""

__version__ = "0.1.0"
