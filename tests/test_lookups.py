"""Tests for provider/OS/endpoint code lookups and the blank-or-raise policy."""

import logging

import pytest

from tailtracer.catalog import (
    CodeResolver,
    Recognized,
    Unrecognized,
    lookup_cloud_provider,
    lookup_operation_name,
    lookup_os_type,
)
from tailtracer.errors import UnrecognizedCodeError


@pytest.mark.parametrize(
    "code, expected",
    [("amzn", "aws"), ("mcrsft", "azure"), ("gogl", "gcp")],
)
def test_cloud_provider_codes(code: str, expected: str) -> None:
    assert lookup_cloud_provider(code) == Recognized(expected)


@pytest.mark.parametrize(
    "code, expected",
    [("lnx", "linux"), ("wndws", "windows"), ("slrs", "solaris")],
)
def test_os_type_codes(code: str, expected: str) -> None:
    assert lookup_os_type(code) == Recognized(expected)


@pytest.mark.parametrize(
    "endpoint, expected",
    [
        ("api/v2.5/balance", "Check Balance"),
        ("api/v2.5/deposit", "Make Deposit"),
        ("api/v2.5/withdrawn", "Fast Cash"),
        ("api/v2.5/withdrawal", "Fast Cash"),
        ("balance", "Check Balance"),
    ],
)
def test_operation_name_by_substring(endpoint: str, expected: str) -> None:
    assert lookup_operation_name(endpoint) == Recognized(expected)


def test_unknown_codes_are_tagged_not_raised() -> None:
    assert lookup_cloud_provider("ibm") == Unrecognized("cloud provider", "ibm")
    assert lookup_os_type("bsd") == Unrecognized("OS type", "bsd")
    assert lookup_operation_name("api/v2.5/transfer") == Unrecognized(
        "endpoint", "api/v2.5/transfer"
    )


def test_provider_lookup_does_not_consult_os_code() -> None:
    """Azure and GCP are keyed on the provider code alone."""
    assert lookup_cloud_provider("lnx") == Unrecognized("cloud provider", "lnx")
    assert lookup_cloud_provider("mcrsft") == Recognized("azure")


def test_resolver_passes_recognized_values() -> None:
    assert CodeResolver().resolve(Recognized("aws")) == "aws"
    assert CodeResolver(strict=True).resolve(Recognized("aws")) == "aws"


def test_resolver_blanks_unknown_and_warns_once(caplog: pytest.LogCaptureFixture) -> None:
    resolver = CodeResolver()
    with caplog.at_level(logging.WARNING, logger="tailtracer"):
        assert resolver.resolve(Unrecognized("OS type", "bsd")) == ""
        assert resolver.resolve(Unrecognized("OS type", "bsd")) == ""
        assert resolver.resolve(Unrecognized("OS type", "hpux")) == ""
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "bsd" in warnings[0].getMessage()
    assert resolver.reported == {("OS type", "bsd"), ("OS type", "hpux")}


def test_strict_resolver_raises() -> None:
    resolver = CodeResolver(strict=True)
    with pytest.raises(UnrecognizedCodeError) as excinfo:
        resolver.resolve(Unrecognized("cloud provider", "ibm"))
    assert excinfo.value.kind == "cloud provider"
    assert excinfo.value.code == "ibm"
    assert "ibm" in str(excinfo.value)
