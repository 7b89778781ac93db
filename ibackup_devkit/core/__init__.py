"""
Core set models, migration transforms and lifecycle flag handling.
"""
