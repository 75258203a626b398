#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the habitdiary project.

This module defines a hierarchy of exceptions used throughout the project
to separate store-integrity failures from caller-input mistakes.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all store-related errors
    │   ├── OpenError - Missing, unreadable or non-diary file
    │   ├── CreateError - Diary file cannot be created
    │   ├── MigrationError - Base for schema upgrade errors
    │   │   ├── UnsupportedVersion - File is newer than this engine
    │   │   └── MigrationFailed - Upgrade step failed and was rolled back
    │   ├── BackupError - Backup creation failures
    │   └── ExchangeError - CSV import/export failures
    └── ValidationError - Caller-input validation failures
        ├── DuplicateCategory - Abbreviation already in use
        ├── CategoryNotFound - Abbreviation does not exist
        └── UnknownCategory - Entry flags reference a missing category

Usage:
    from habitdiary.core.exceptions import DatabaseError, ValidationError

    try:
        diary.upsert_entry(day, {"GAM": True})
    except ValidationError as e:
        logger.error(f"Invalid data: {e}")
    except DatabaseError as e:
        logger.error(f"Diary operation failed: {e}")
"""


class DatabaseError(Exception):
    """
    Base exception for store-related errors.

    Raised when diary storage fails due to I/O problems, integrity
    violations, schema mismatches, or other problems that require user
    intervention. These errors are never retried automatically.

    Catch this to handle any store error, or catch specific subclasses
    for more granular error handling.

    Examples:
        >>> raise DatabaseError("Data integrity violation: duplicate date")
    """

    pass


class OpenError(DatabaseError):
    """
    Exception for diary files that cannot be opened.

    Raised when:
    - The file does not exist
    - The file is not an SQLite database
    - The database does not contain diary tables

    Examples:
        >>> raise OpenError("Diary file not found: /tmp/missing.db")
    """

    pass


class CreateError(DatabaseError):
    """
    Exception for diary creation failures.

    Raised when a file already exists at the target path (diaries are
    never silently overwritten) or when the file cannot be written.

    Examples:
        >>> raise CreateError("A file already exists at /tmp/habits.db")
    """

    pass


class MigrationError(DatabaseError):
    """Base exception for schema upgrade errors."""

    pass


class UnsupportedVersion(MigrationError):
    """
    Exception for stores written by a newer engine.

    The store is never downgraded; the user must upgrade habitdiary.

    Attributes:
        stored_version: Schema version found in the file
        supported_version: Newest schema version this engine understands
    """

    def __init__(self, stored_version: int, supported_version: int) -> None:
        self.stored_version = stored_version
        self.supported_version = supported_version
        super().__init__(
            f"Diary schema version {stored_version} is newer than the "
            f"supported version {supported_version}"
        )


class MigrationFailed(MigrationError):
    """
    Exception for a schema upgrade step that errored.

    The failing step has been rolled back; the store is left at the last
    fully applied version.

    Attributes:
        from_version: Version the failing step started from
    """

    def __init__(self, from_version: int, message: str) -> None:
        self.from_version = from_version
        super().__init__(
            f"Migration {from_version} -> {from_version + 1} failed: {message}"
        )


class BackupError(DatabaseError):
    """
    Exception for backup creation failures.

    Examples:
        >>> raise BackupError("Failed to create backup: disk full")
    """

    pass


class ExchangeError(DatabaseError):
    """
    Exception for CSV import and export failures.

    Examples:
        >>> raise ExchangeError("Cannot parse date on line 4: '2024-13-01'")
    """

    pass


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when caller input does not meet requirements. These errors are
    recoverable by correcting the input; the diary is left unchanged.

    Examples:
        >>> raise ValidationError("Category abbreviation cannot be empty")
        >>> raise ValidationError("Invalid date format: 2024-02-30")
    """

    pass


class DuplicateCategory(ValidationError):
    """Exception for adding a category whose abbreviation is already visible."""

    def __init__(self, abbreviation: str) -> None:
        self.abbreviation = abbreviation
        super().__init__(f"Category '{abbreviation}' already exists")


class CategoryNotFound(ValidationError):
    """Exception for referencing a category that does not exist."""

    def __init__(self, abbreviation: str) -> None:
        self.abbreviation = abbreviation
        super().__init__(f"Category '{abbreviation}' does not exist")


class UnknownCategory(ValidationError):
    """
    Exception for entry flags naming categories the diary does not track.

    Attributes:
        abbreviations: Sorted list of the unknown keys
    """

    def __init__(self, abbreviations) -> None:
        self.abbreviations = sorted(abbreviations)
        super().__init__(
            f"Unknown categories in entry: {', '.join(self.abbreviations)}"
        )
