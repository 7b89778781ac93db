"""
ibackup-devkit command-line entry points.
"""
