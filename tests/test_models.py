from decimal import Decimal

import pytest

from nunit_runner.models import Case, Fixture, ResultKind, TestRun, format_duration, strip_case_namespace


@pytest.mark.parametrize(
    "total,failed,skipped,expected",
    [
        (3, 1, 0, Decimal("66.7")),
        (4, 1, 1, Decimal("66.7")),
        (10, 0, 2, Decimal("100")),
        (8, 8, 0, Decimal("0")),
        (7, 2, 0, Decimal("71.4")),
    ],
)
def test_success_rate_is_hundred_minus_rounded_failure_rate(total, failed, skipped, expected) -> None:
    run = TestRun(name="run", total=total, failed=failed, skipped=skipped)
    assert run.success_rate == expected
    assert run.failure_rate == round(Decimal(failed) / Decimal(total - skipped) * 100, 1)


def test_success_rate_is_hundred_for_empty_run() -> None:
    run = TestRun(name="empty")
    assert run.failure_rate == 0
    assert run.success_rate_text == "100"


def test_success_rate_when_everything_was_skipped() -> None:
    run = TestRun(name="skipped", total=2, skipped=2)
    assert run.success_rate_text == "100"


def test_success_rate_text_keeps_one_decimal() -> None:
    assert TestRun(name="run", total=3, failed=1).success_rate_text == "66.7"
    assert TestRun(name="run", total=2, failed=1).success_rate_text == "50.0"
    assert TestRun(name="run", total=4, failed=1).success_rate_text == "75.0"


def test_success_rate_text_without_failures_or_all_failed() -> None:
    assert TestRun(name="run", total=5, passed=5).success_rate_text == "100"
    assert TestRun(name="run", total=3, failed=3).success_rate_text == "0"


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Ns.Class.Method", "Method"),
        ("Ns.Class.Method(1,2)", "Method(1,2)"),
        ("Ns.Class.Method(1.5,\"a.b\")", "Method(1.5,\"a.b\")"),
        ("Method", "Method"),
        ("Method(3)", "Method(3)"),
    ],
)
def test_strip_case_namespace(name, expected) -> None:
    assert strip_case_namespace(name) == expected


def test_format_duration() -> None:
    assert format_duration(0.25) == "0.25s"
    assert format_duration(0.0) == "0s"
    assert format_duration(12.0) == "12s"
    assert format_duration(1.234567) == "1.234567s"
    assert format_duration(1234567.5) == "1234567.5s"
    assert format_duration(None) == ""


def test_result_kind_is_case_insensitive() -> None:
    assert ResultKind.from_result("Passed") is ResultKind.PASSED
    assert ResultKind.from_result("FAILED") is ResultKind.FAILED
    assert ResultKind.from_result("Inconclusive") is ResultKind.OTHER


def test_fixture_reason_hides_duration() -> None:
    fixture = Fixture(name="F", namespace="Ns", result="Ignored", duration=1.5, reason="later")
    assert fixture.duration_text == ""
    assert Fixture(name="F", namespace="Ns", result="Passed", duration=1.5).duration_text == "1.5s"


def test_case_display_name_and_kind() -> None:
    case = Case(name="Ns.Class.Method(1,2)", result="Error", duration=0.5)
    assert case.display_name == "Method(1,2)"
    assert case.kind is ResultKind.ERROR
    assert case.duration_text == "0.5s"
