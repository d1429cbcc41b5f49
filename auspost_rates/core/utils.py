"""
Core Utilities

Shared helpers used across the application.
"""
from typing import Optional

import pycountry


def normalize_country_code(country: Optional[str]) -> Optional[str]:
    """
    Return the ISO 3166 alpha-2 code for a country.

    Accepts alpha-2, alpha-3 or a country name in any case. Values
    pycountry does not know are returned upper-cased so the carrier can
    report them.
    """
    if not country or not country.strip():
        return None
    value = country.strip()
    try:
        return pycountry.countries.lookup(value).alpha_2
    except LookupError:
        return value.upper()


def country_name(alpha_2: str) -> str:
    """Common English name for an alpha-2 code (falls back to the code)."""
    match = pycountry.countries.get(alpha_2=alpha_2)
    return match.name if match else alpha_2
