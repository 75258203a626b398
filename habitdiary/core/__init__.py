"""
Core utilities shared by the diary engine: exceptions, logging,
validation, default paths, settings and backups.
"""
