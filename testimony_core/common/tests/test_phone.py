import pytest

from testimony_core.common.phone import normalize_phone, phone_digit_forms, phones_match


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("020 123 4567", "+232201234567"),
        ("+232201234567", "+232201234567"),
        ("232-20-123-4567", "+232201234567"),
        ("(076) 555-111", "+23276555111"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_local_and_international_forms_are_the_same_owner():
    assert phones_match("020 123 4567", "+232201234567")


@pytest.mark.parametrize("raw", [None, "", "   ", "no digits"])
def test_empty_phone_normalizes_to_empty_and_never_matches(raw):
    assert normalize_phone(raw) == ""
    assert not phones_match(raw, raw)


def test_country_code_is_configurable(settings):
    settings.PHONE_COUNTRY_CODE = "44"
    assert normalize_phone("07700 900123") == "+447700900123"


def test_digit_forms_cover_local_and_international_spellings():
    assert phone_digit_forms("020 123 4567") == {"232201234567", "0201234567"}
    assert phone_digit_forms("+232 20 123 4567") == {"232201234567", "0201234567"}
    assert phone_digit_forms("") == set()
