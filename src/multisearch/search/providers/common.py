"""Helpers shared by several provider adapters."""

from __future__ import annotations

import re

_QDR_PATTERN = re.compile(r"(?:^|,)qdr:([a-z])")


def tbs_to_period(tbs: str | None, periods: dict[str, str]) -> str | None:
    """Translate a Google ``tbs`` time filter (``qdr:w``) into a provider value.

    Args:
        tbs: Raw ``tbs`` option, possibly combined with other flags
        periods: Mapping from the ``qdr`` unit letter to the provider's value

    Returns:
        The provider-specific period, or None when the filter is absent or unknown
    """
    if not tbs:
        return None
    match = _QDR_PATTERN.search(tbs.strip().lower())
    if match is None:
        return None
    return periods.get(match.group(1))
