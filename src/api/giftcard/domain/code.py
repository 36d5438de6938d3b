"""Normalization of customer-entered gift card codes."""

from __future__ import annotations

import re

from giftcard.domain.exceptions import InvalidFormatError
from giftcard.domain.value_objects import SUFFIX_LENGTH, NormalizedCode

_SEPARATORS = re.compile(r"[\s-]+")


def normalize_code(raw: str) -> NormalizedCode:
    """Turn raw input into a canonical code and its four character suffix.

    Whitespace and hyphens are removed and letters uppercased, so
    ``"ab-1234 ab12"`` becomes ``"AB1234AB12"`` with suffix ``"AB12"``.

    Raises:
        InvalidFormatError: If fewer than four characters remain.
    """
    canonical = _SEPARATORS.sub("", raw or "").upper()
    if len(canonical) < SUFFIX_LENGTH:
        raise InvalidFormatError("Invalid code format")
    return NormalizedCode(canonical=canonical, suffix=canonical[-SUFFIX_LENGTH:])
