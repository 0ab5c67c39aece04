"""The record provider capability the HTTP adapter delegates to."""

from abc import ABC, abstractmethod

from external_dns_plugin.core.models import Changes, Endpoint


class Provider(ABC):
    """
    Backend capability driven by ExternalDNS through the plugin API.

    Implementations are called from worker threads and may be invoked
    concurrently; they must do their own locking.
    """

    @abstractmethod
    def records(self) -> list[Endpoint]:
        """
        Return all records the backend manages.

        Raises:
            BackendUnavailableError: If the backend cannot be read.
        """

    @abstractmethod
    def apply_changes(self, changes: Changes) -> None:
        """
        Apply a change batch.

        Either the whole batch becomes visible to later ``records()`` calls
        or an exception is raised.

        Raises:
            BackendUnavailableError: If the backend cannot be written.
            ValidationFailureError: If the batch is inconsistent with the
                backend state.
        """

    def adjust_endpoints(self, endpoints: list[Endpoint]) -> list[Endpoint]:
        """Normalize desired endpoints before planning. Must not touch state."""
        return endpoints

    def property_values_equal(self, name: str, previous: str, current: str) -> bool:
        """Compare a provider-specific property. Must not touch state."""
        return previous == current
