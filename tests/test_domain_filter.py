"""Tests for dns/domain_filter.py."""

# pylint: disable=missing-function-docstring

import pytest

from external_dns_plugin.dns.domain_filter import DomainFilter


class TestDomainFilter:
    """Tests for DomainFilter.match."""

    def test_empty_filter_matches_everything(self):
        domain_filter = DomainFilter()

        assert not domain_filter.is_configured()
        assert domain_filter.match("anything.example.org")

    @pytest.mark.parametrize(
        "domain",
        ["example.com", "www.example.com", "a.b.example.com", "WWW.Example.COM."],
    )
    def test_suffix_matches_domain_and_subdomains(self, domain):
        assert DomainFilter.from_lists(["example.com"]).match(domain)

    @pytest.mark.parametrize("domain", ["example.org", "notexample.com", "com"])
    def test_suffix_rejects_other_domains(self, domain):
        assert not DomainFilter.from_lists(["example.com"]).match(domain)

    def test_leading_dot_matches_subdomains_only(self):
        domain_filter = DomainFilter.from_lists([".example.com"])

        assert domain_filter.match("www.example.com")
        assert not domain_filter.match("example.com")

    def test_trailing_dot_in_filter_is_ignored(self):
        assert DomainFilter.from_lists(["example.com."]).match("www.example.com")

    def test_exclusion_wins_over_inclusion(self):
        domain_filter = DomainFilter.from_lists(
            ["example.com"], ["internal.example.com"]
        )

        assert domain_filter.match("www.example.com")
        assert not domain_filter.match("db.internal.example.com")

    def test_exclusion_without_inclusion(self):
        domain_filter = DomainFilter.from_lists([], ["example.org"])

        assert domain_filter.is_configured()
        assert domain_filter.match("example.com")
        assert not domain_filter.match("example.org")

    def test_multiple_filters(self):
        domain_filter = DomainFilter.from_lists(["example.com", "example.net"])

        assert domain_filter.match("a.example.net")
        assert not domain_filter.match("a.example.org")

    def test_blank_entries_are_dropped(self):
        domain_filter = DomainFilter.from_lists(["", "  "], [" "])

        assert not domain_filter.is_configured()

    def test_wildcard_name_matches(self):
        assert DomainFilter.from_lists(["example.com"]).match("*.example.com")

    def test_unparsable_domain_is_rejected(self):
        assert not DomainFilter.from_lists(["example.com"]).match("a..example.com")
