# testimony_core/common/phone.py
from __future__ import annotations

import re

from django.conf import settings

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str | None) -> str:
    """
    Canonical phone form used for identity lookups and ownership checks.

    - strip everything that is not a digit
    - a leading trunk prefix ("0") becomes the country code ("232")
    - prefix "+"

    "020 123 4567" and "+232201234567" both normalize to "+232201234567".
    Empty input stays empty so it can never match anything.
    """
    if not phone:
        return ""

    digits = _NON_DIGITS.sub("", str(phone))
    if not digits:
        return ""

    trunk = getattr(settings, "PHONE_TRUNK_PREFIX", "0")
    country_code = getattr(settings, "PHONE_COUNTRY_CODE", "232")
    if trunk and digits.startswith(trunk):
        digits = country_code + digits[len(trunk):]

    return "+" + digits


def phones_match(a: str | None, b: str | None) -> bool:
    na = normalize_phone(a)
    return bool(na) and na == normalize_phone(b)


def phone_digit_forms(phone: str | None) -> set[str]:
    """
    Digit-only spellings that normalize to the same number, for matching
    stored values in the database: international ("232201234567") and
    local trunk form ("0201234567").
    """
    normalized = normalize_phone(phone)
    if not normalized:
        return set()

    digits = normalized[1:]
    forms = {digits}
    trunk = getattr(settings, "PHONE_TRUNK_PREFIX", "0")
    country_code = getattr(settings, "PHONE_COUNTRY_CODE", "232")
    if trunk and digits.startswith(country_code):
        forms.add(trunk + digits[len(country_code):])
    return forms
