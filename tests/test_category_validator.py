"""Tests for category name validation."""

import pytest

from gitinsight.services.category_validator import is_valid_category, rejection_reason


# ---------------------------------------------------------------------------
# Accepted names
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "candidate",
    ["BILLING", "API", "CS", "SECURITY", "OAUTH2", "WEB3", "PAYMENT-GATEWAY", "DATA PIPELINE", "  AUTH  "],
)
def test_business_categories_are_valid(candidate: str) -> None:
    assert is_valid_category(candidate, prevent_numeric=True)


def test_exactly_two_and_fifty_characters_are_valid() -> None:
    assert is_valid_category("AB", prevent_numeric=True)
    assert is_valid_category("A" * 50, prevent_numeric=True)


# ---------------------------------------------------------------------------
# Always rejected
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("prevent_numeric", [True, False])
@pytest.mark.parametrize(
    "candidate, reason",
    [
        (None, "nil or empty"),
        ("", "nil or empty"),
        ("   ", "nil or empty"),
        ("A", "too short (<2 chars)"),
        ("A" * 51, "too long (>50 chars)"),
    ],
)
def test_shape_rules_apply_regardless_of_policy(candidate, reason, prevent_numeric) -> None:
    assert not is_valid_category(candidate, prevent_numeric=prevent_numeric)
    assert rejection_reason(candidate, prevent_numeric=prevent_numeric) == reason


@pytest.mark.parametrize("candidate", ["_INTERNAL", "-API", ".DOTFILES", "#SECURITY", "1ST-PARTY"])
def test_must_start_with_a_letter(candidate: str) -> None:
    assert not is_valid_category(candidate, prevent_numeric=False)
    assert rejection_reason(candidate, prevent_numeric=False) == "does not start with a letter"


# ---------------------------------------------------------------------------
# Numeric policy
# ---------------------------------------------------------------------------


class TestNumericPolicyEnabled:
    @pytest.mark.parametrize("candidate", ["2.58.0", "1.2", "10.4.1", "3.0-BETA"])
    def test_rejects_versions(self, candidate: str) -> None:
        assert not is_valid_category(candidate, prevent_numeric=True)
        assert rejection_reason(candidate, prevent_numeric=True) == "looks like version number"

    @pytest.mark.parametrize("candidate", ["2023", "123", "#6802", "#117"])
    def test_rejects_purely_numeric(self, candidate: str) -> None:
        assert not is_valid_category(candidate, prevent_numeric=True)
        assert rejection_reason(candidate, prevent_numeric=True) == "purely numeric"

    @pytest.mark.parametrize("candidate", ["A1", "AB12", "V2024", "X1234"])
    def test_rejects_half_or_more_digits(self, candidate: str) -> None:
        assert not is_valid_category(candidate, prevent_numeric=True)
        assert rejection_reason(candidate, prevent_numeric=True) == "too many digits (>=50%)"

    def test_some_digits_below_half_are_fine(self) -> None:
        assert is_valid_category("ABC12", prevent_numeric=True)


class TestNumericPolicyDisabled:
    @pytest.mark.parametrize("candidate", ["2.58.0", "1.2.3", "#6802", "2023"])
    def test_versions_and_issue_numbers_still_rejected(self, candidate: str) -> None:
        assert not is_valid_category(candidate, prevent_numeric=False)

    def test_digit_heavy_names_starting_with_letter_allowed(self) -> None:
        assert is_valid_category("V2024", prevent_numeric=False)
        assert is_valid_category("A1", prevent_numeric=False)


def test_policy_defaults_to_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from gitinsight.config import get_settings

    monkeypatch.setenv("PREVENT_NUMERIC_CATEGORIES", "false")
    get_settings.cache_clear()
    assert is_valid_category("V2024")

    monkeypatch.setenv("PREVENT_NUMERIC_CATEGORIES", "true")
    get_settings.cache_clear()
    assert not is_valid_category("V2024")
