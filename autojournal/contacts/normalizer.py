"""
autojournal/contacts/normalizer.py
Expands one raw phone identifier into every lookup key it could be stored
under. Message exports write the same number as +15551234567, 5551234567,
(555) 123-4567 or +5551234567 depending on the thread, so the directory
indexes all of them.

Never raises. Worst case the caller gets the raw string back as its only key.
"""

import logging
import re
from typing import List

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

logger = logging.getLogger(__name__)

DEFAULT_REGION = 'US'

_NON_PHONE_CHARS = re.compile(r'[^\d+]')
_NON_DIGITS      = re.compile(r'\D')


def clean_identifier(raw: str) -> str:
    """Keep digits and '+' only."""
    return _NON_PHONE_CHARS.sub('', raw or '')


def is_email(identifier: str) -> bool:
    return '@' in (identifier or '')


def normalize_phone(raw: str) -> List[str]:
    """
    Return the ordered, de-duplicated key variants for a phone string.
    The digit-and-'+' form of the input is always the last key added.
    """
    try:
        clean = clean_identifier(raw)
        keys: List[str] = []

        keys.extend(_parsed_variants(clean))
        keys.extend(_manual_variants(clean))
        keys.append(clean)

        return list(dict.fromkeys(keys))
    except Exception as e:
        logger.debug(f"Phone normalization degraded to raw input: {e}")
        return [raw]


# ── STRUCTURED PARSE ─────────────────────────────────────────

def _parsed_variants(clean: str) -> List[str]:
    try:
        parsed = phonenumbers.parse(clean, DEFAULT_REGION)
    except NumberParseException:
        return []
    if not phonenumbers.is_valid_number(parsed):
        return []

    e164     = phonenumbers.format_number(parsed, PhoneNumberFormat.E164)
    national = phonenumbers.national_significant_number(parsed)
    display  = phonenumbers.format_number(parsed, PhoneNumberFormat.NATIONAL)
    return [e164, e164[1:], national, _NON_DIGITS.sub('', display)]


# ── MANUAL RULES ─────────────────────────────────────────────
# Applied whether or not the structured parse succeeded.

def _manual_variants(clean: str) -> List[str]:
    # +15551234567
    if clean.startswith('+1') and len(clean) == 12:
        return [clean, clean[1:], clean[2:], '+' + clean[2:]]

    # +5551234567 (country code dropped by the exporter)
    if clean.startswith('+') and len(clean) == 11:
        with_country = '+1' + clean[1:]
        return [clean, clean[1:], with_country, with_country[1:]]

    # 15551234567
    if clean.startswith('1') and len(clean) == 11:
        prefixed = '+' + clean
        return [prefixed, prefixed[1:]]

    if not clean.startswith('+'):
        if len(clean) == 10:
            prefixed = '+1' + clean
        else:
            prefixed = '+' + clean.lstrip('0')
        return [prefixed, prefixed[1:]]

    return []
