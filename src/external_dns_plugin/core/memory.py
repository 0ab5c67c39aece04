"""In-process record provider used as the reference backend."""

import logging
import threading
from typing import Iterable, Optional

from external_dns_plugin.core.config import Settings
from external_dns_plugin.core.models import Changes, Endpoint
from external_dns_plugin.core.provider import Provider
from external_dns_plugin.dns.domain_filter import DomainFilter
from external_dns_plugin.utils.exceptions import ValidationFailureError

logger = logging.getLogger(__name__)


def storage_key(prefix: str, endpoint: Endpoint) -> str:
    """
    Build the skydns-style storage path for an endpoint.

    ``www.example.com`` type ``A`` under ``/skydns/`` becomes
    ``/skydns/com/example/www/a``; a set identifier adds one more segment.
    """
    name, record_type, set_identifier = endpoint.key
    path = prefix.rstrip("/") + "/" + "/".join(reversed(name.split(".")))
    path += "/" + record_type.lower()

    if set_identifier:
        path += "/" + set_identifier

    return path


class InMemoryProvider(Provider):
    """
    Keeps records in a dict guarded by a lock.

    Change batches are validated as a whole before anything is written and
    then swapped in at once, so readers see either the old or the new state.
    """

    def __init__(
        self,
        records: Optional[Iterable[Endpoint]] = None,
        domain_filter: Optional[DomainFilter] = None,
        record_prefix: str = "/skydns/",
        owner_id: str = "default",
        pre_filter_owned_records: bool = False,
        dry_run: bool = False,
    ):
        self.domain_filter = domain_filter or DomainFilter()
        self.record_prefix = record_prefix
        self.owner_id = owner_id
        self.pre_filter_owned_records = pre_filter_owned_records
        self.dry_run = dry_run

        self._lock = threading.Lock()
        self._records: dict[str, Endpoint] = {}

        for endpoint in records or ():
            self._records[self._key(endpoint)] = endpoint

        if self.domain_filter.is_configured():
            logger.info(
                "domain filter: %s, excluding: %s",
                list(self.domain_filter.filters),
                list(self.domain_filter.exclusions),
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "InMemoryProvider":
        """Build a provider from application settings."""
        return cls(
            domain_filter=DomainFilter.from_lists(
                settings.domain_filter_list, settings.exclude_domains_list
            ),
            record_prefix=settings.record_prefix,
            owner_id=settings.txt_owner_id,
            pre_filter_owned_records=settings.pre_filter_external_owned_records,
            dry_run=settings.dry_run,
        )

    def _key(self, endpoint: Endpoint) -> str:
        return storage_key(self.record_prefix, endpoint)

    def _visible(self, endpoint: Endpoint) -> bool:
        if not self.domain_filter.match(endpoint.dns_name):
            return False

        if self.pre_filter_owned_records and endpoint.owner != self.owner_id:
            return False

        return True

    def records(self) -> list[Endpoint]:
        with self._lock:
            snapshot = list(self._records.values())

        return [endpoint for endpoint in snapshot if self._visible(endpoint)]

    def apply_changes(self, changes: Changes) -> None:
        if not changes.has_changes():
            logger.debug("no changes to apply")
            return

        with self._lock:
            self._validate(changes)

            if self.dry_run:
                self._log_changes(changes, prefix="[dry-run] would ")
                return

            removed = {self._key(endpoint) for endpoint in changes.delete}
            removed.update(
                self._key(old)
                for old, new in changes.updates()
                if self._key(old) != self._key(new)
            )

            records = {k: v for k, v in self._records.items() if k not in removed}

            for _, new in changes.updates():
                records[self._key(new)] = new

            for endpoint in changes.create:
                records[self._key(endpoint)] = endpoint

            self._records = records

        self._log_changes(changes)

    def adjust_endpoints(self, endpoints: list[Endpoint]) -> list[Endpoint]:
        return [
            endpoint.model_copy(
                update={"dns_name": endpoint.dns_name.rstrip(".").lower()}
            )
            for endpoint in endpoints
        ]

    def _validate(self, changes: Changes) -> None:
        """Reject the batch unless every change applies cleanly."""
        for endpoint in (
            changes.create + changes.update_old + changes.update_new + changes.delete
        ):
            if not self.domain_filter.match(endpoint.dns_name):
                raise ValidationFailureError(
                    f"{endpoint.dns_name} is outside the domain filter"
                )

        removing = [self._key(e) for e in changes.delete + changes.update_old]
        adding = [self._key(e) for e in changes.create + changes.update_new]

        for keys, action in ((removing, "removed"), (adding, "added")):
            if len(set(keys)) != len(keys):
                raise ValidationFailureError(f"a record is {action} more than once")

        for key in removing:
            if key not in self._records:
                raise ValidationFailureError(f"record {key} does not exist")

        freed = set(removing)
        for key in adding:
            if key in self._records and key not in freed:
                raise ValidationFailureError(f"record {key} already exists")

    def _log_changes(self, changes: Changes, prefix: str = "") -> None:
        for endpoint in changes.create:
            logger.info("%screate %s", prefix, endpoint)
        for old, new in changes.updates():
            logger.info("%supdate %s -> %s", prefix, old, new)
        for endpoint in changes.delete:
            logger.info("%sdelete %s", prefix, endpoint)
