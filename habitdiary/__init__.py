"""
habitdiary
==========

Engine of a personal habit tracker.

Users record, per calendar day, which of a small set of named habit
categories occurred. This package stores that history in a versioned
SQLite file and turns it into period-over-period comparisons and
"most frequent composition" rankings.

Subpackages:
    core: exceptions, logging, validation, paths, settings, backups
    dataclasses: value types handed to callers
    database: the Diary store, aggregation, CSV exchange, maintenance CLI
"""

__version__ = "1.0.0"
