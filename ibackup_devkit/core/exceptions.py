"""
Exception hierarchy for ibackup-devkit.

Mapping errors carry the offending value so the CLI can report which set and
which input stopped a migration.
"""


class DevkitError(Exception):
    """Base class for all ibackup-devkit errors."""


class WrongTransformerError(DevkitError):
    """Raised when a transformer specifier cannot be compiled."""

    def __init__(self, specifier: str, detail: str | None = None):
        self.specifier = specifier
        self.detail = detail
        message = f"wrong transformer: {specifier}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class WrongMetadataError(DevkitError):
    """Raised when a reserved metadata key is missing or malformed."""

    def __init__(self, key: str, value: str, detail: str):
        self.key = key
        self.value = value
        self.detail = detail
        super().__init__(f"wrong metadata value for key {key}: {detail}")


class MissingCredentialsError(DevkitError):
    """Raised when database connection settings are incomplete."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "connection details for the database are not set: " + ", ".join(missing)
        )


class StoreError(DevkitError):
    """Raised when a source or target store operation fails."""


class DuplicateSetError(StoreError):
    """Raised when a set with the same name and requester already exists."""

    def __init__(self, name: str, requester: str):
        self.name = name
        self.requester = requester
        super().__init__(f"set already exists: {requester}/{name}")
