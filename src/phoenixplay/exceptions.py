"""Custom exception hierarchy for phoenixplay."""

from __future__ import annotations

from typing import Any


class PhoenixError(Exception):
    """Base exception for all phoenixplay errors."""


class PhoenixConfigError(PhoenixError):
    """Invalid or missing configuration."""


class PhoenixDatasetError(PhoenixError):
    """A failure scoped to one dataset load.

    ``stage`` names where the load stopped (``fetch``, ``parse``,
    ``bucketize`` or ``register``) so callers can render a useful message.
    """

    def __init__(
        self,
        message: str,
        *,
        dataset: str = "",
        stage: str = "",
    ) -> None:
        self.dataset = dataset
        self.stage = stage
        super().__init__(message)


class MalformedRecordError(PhoenixDatasetError):
    """A record field is present but cannot be read, e.g. a non-numeric time."""

    def __init__(
        self,
        message: str,
        *,
        field: str = "",
        value: Any = None,
        dataset: str = "",
        stage: str = "parse",
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message, dataset=dataset, stage=stage)


class EmptyDatasetError(PhoenixDatasetError):
    """The ingested collection holds no records."""


class LoadFailedError(PhoenixDatasetError):
    """Network or transport failure while fetching a dataset.

    The previously active dataset is left untouched when this is raised.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
        dataset: str = "",
        stage: str = "fetch",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message, dataset=dataset, stage=stage)


class DuplicateRegistrationError(PhoenixError):
    """A bucket was registered twice without an intervening ``clear()``.

    This always indicates an integration bug.
    """

    def __init__(self, message: str, *, bucket_index: int | None = None) -> None:
        self.bucket_index = bucket_index
        super().__init__(message)


class ResourceNotFoundError(PhoenixError):
    """No handle or surface resource exists for the requested id."""

    def __init__(
        self,
        message: str,
        *,
        resource_id: str = "",
        bucket_index: int | None = None,
    ) -> None:
        self.resource_id = resource_id
        self.bucket_index = bucket_index
        super().__init__(message)
