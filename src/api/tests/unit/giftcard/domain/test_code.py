"""Unit tests for gift card code normalization."""

import pytest

from giftcard.domain.code import normalize_code
from giftcard.domain.exceptions import ErrorKind, InvalidFormatError


class TestNormalizeCode:
    """Tests for normalize_code."""

    def test_strips_separators_and_uppercases(self):
        """Whitespace and hyphens are removed and letters uppercased."""
        code = normalize_code("ab-1234 ab12")

        assert code.canonical == "AB1234AB12"
        assert code.suffix == "AB12"

    def test_suffix_is_last_four_characters(self):
        """Suffix is taken from the end of the canonical code."""
        code = normalize_code("XXXX-YYYY-ZZZZ-cd34")

        assert code.suffix == "CD34"

    def test_exactly_four_characters_is_valid(self):
        """A four character code is its own suffix."""
        code = normalize_code("zz99")

        assert code.canonical == "ZZ99"
        assert code.suffix == "ZZ99"

    def test_tabs_and_newlines_are_removed(self):
        """All whitespace counts as a separator."""
        code = normalize_code("\tab12\n-cd34 ")

        assert code.canonical == "AB12CD34"

    @pytest.mark.parametrize("raw", ["", "   ", "ab1", "a-b-c", "- - -"])
    def test_short_input_raises_invalid_format(self, raw):
        """Fewer than four characters after stripping is rejected."""
        with pytest.raises(InvalidFormatError) as exc_info:
            normalize_code(raw)

        assert exc_info.value.kind is ErrorKind.INVALID_FORMAT
        assert exc_info.value.message == "Invalid code format"

    @pytest.mark.parametrize(
        "raw",
        ["abcd", "AbCd-EfGh", " 1234 5678 9012 ab12 ", "x-y-z-w-v"],
    )
    def test_normalization_is_idempotent(self, raw):
        """Normalizing a canonical code returns the same code."""
        once = normalize_code(raw)
        twice = normalize_code(once.canonical)

        assert twice == once

    @pytest.mark.parametrize(
        "raw",
        ["abcd", "ab cd ef", "1234-5678-abcd-efgh", "a1b2c3d4e5"],
    )
    def test_canonical_form_has_no_separators(self, raw):
        """Canonical codes are uppercase with no whitespace or hyphens."""
        code = normalize_code(raw)

        assert len(code.canonical) >= 4
        assert len(code.suffix) == 4
        assert code.canonical == code.canonical.upper()
        assert " " not in code.canonical
        assert "-" not in code.canonical
        assert code.canonical.endswith(code.suffix)
