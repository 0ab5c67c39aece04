"""Domain allow/deny filtering for provider backends."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

import dns.exception
import dns.name

logger = logging.getLogger(__name__)


def _to_name(domain: str) -> dns.name.Name:
    """Parse a domain as an absolute, lowercased DNS name."""
    return dns.name.from_text(domain.strip().rstrip(".").lower() + ".")


@dataclass(frozen=True)
class DomainFilter:
    """
    Restricts which domains a provider may observe or mutate.

    An empty include list admits every domain that is not excluded. A filter
    written with a leading dot (``.example.com``) admits strict subdomains
    only; otherwise the domain itself and all its subdomains match.
    """

    filters: tuple[str, ...] = field(default_factory=tuple)
    exclusions: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_lists(
        cls, filters: Iterable[str] = (), exclusions: Iterable[str] = ()
    ) -> "DomainFilter":
        """Build a filter, dropping blank entries."""
        return cls(
            filters=tuple(f.strip() for f in filters if f.strip()),
            exclusions=tuple(e.strip() for e in exclusions if e.strip()),
        )

    def is_configured(self) -> bool:
        """Check whether any include or exclude rule is set."""
        return bool(self.filters or self.exclusions)

    def match(self, domain: str) -> bool:
        """Check whether the domain is admitted by this filter."""
        try:
            name = _to_name(domain)
        except dns.exception.DNSException:
            logger.debug("Rejecting unparsable domain %r", domain)
            return False

        if any(_matches(name, rule) for rule in self.exclusions):
            return False

        if not self.filters:
            return True

        return any(_matches(name, rule) for rule in self.filters)


def _matches(name: dns.name.Name, rule: str) -> bool:
    subdomains_only = rule.startswith(".")

    try:
        suffix = _to_name(rule.lstrip("."))
    except dns.exception.DNSException:
        return False

    if subdomains_only:
        return name != suffix and name.is_subdomain(suffix)

    return name.is_subdomain(suffix)
