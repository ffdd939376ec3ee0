"""
autojournal/contacts/rewriter.py
Replaces phone numbers and email addresses inside transcript text with
contact names from a ContactDirectory.

Single left-to-right scan with two states:
  PLAIN         copying ordinary text, watching for a token boundary
  IN_CANDIDATE  at a position that may start a phone/email token;
                classify the longest token there or fall back to PLAIN

Because replaced spans are emitted and skipped, a name substituted for one
token is never rescanned by another pattern.

Recognized phone shapes:
  +15551234567        +1 and 10 digits
  +447911123456       + and 11 or more digits
  +5551234567         + and exactly 10 digits
  5551234567          10 bare digits, not part of a longer word
  (555) 123-4567      area code in parentheses
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from autojournal.contacts.directory import ContactDirectory

logger = logging.getLogger(__name__)

PLAIN        = 'PLAIN'
IN_CANDIDATE = 'IN_CANDIDATE'

TOKEN_PLAIN = 'plain'
TOKEN_PHONE = 'phone'
TOKEN_EMAIL = 'email'

_EMAIL_RE = re.compile(r'[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}')

# Order matters only where two shapes could start at the same position;
# the '+' shapes are mutually exclusive by digit count.
_PHONE_RES = [
    re.compile(r'\+1\d{10}(?!\d)'),
    re.compile(r'\+\d{11,}'),
    re.compile(r'\+\d{10}(?!\d)'),
    re.compile(r'\d{10}(?!\w)'),
    re.compile(r'\(\d{3}\)\s*\d{3}[-\s]?\d{4}(?!\d)'),
]

_EMAIL_CHARS = set('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._%+-')
_PHONE_START = set('+0123456789(')


@dataclass(frozen=True)
class Token:
    kind:  str      # plain / phone / email
    text:  str
    start: int


def scan_tokens(text: str) -> Iterator[Token]:
    """Split text into plain, phone and email tokens, left to right."""
    state       = PLAIN
    pos         = 0
    plain_start = 0
    length      = len(text)

    while pos < length:
        if state == PLAIN:
            if any(_allowed_kinds(text, pos)):
                state = IN_CANDIDATE
            else:
                pos += 1
            continue

        # IN_CANDIDATE
        kind, end = _classify_at(text, pos, *_allowed_kinds(text, pos))
        if kind is None:
            pos += 1
        else:
            if plain_start < pos:
                yield Token(TOKEN_PLAIN, text[plain_start:pos], plain_start)
            yield Token(kind, text[pos:end], pos)
            pos         = end
            plain_start = end
        state = PLAIN

    if plain_start < length:
        yield Token(TOKEN_PLAIN, text[plain_start:], plain_start)


def _allowed_kinds(text: str, pos: int) -> Tuple[bool, bool]:
    """(phone, email): which token kinds may start at pos."""
    ch   = text[pos]
    prev = text[pos - 1] if pos > 0 else ''

    # bare digits need a word boundary; '+' and '(' shapes start anywhere
    if ch.isdigit():
        phone = not (prev.isalnum() or prev == '_')
    else:
        phone = ch in _PHONE_START

    # an email local part must not continue a longer one
    email = ch in _EMAIL_CHARS and not (prev.isalnum() or prev in _EMAIL_CHARS)
    return phone, email


def _classify_at(text: str, pos: int, phone: bool = True, email: bool = True):
    """Return (kind, end) for the longest allowed token at pos, or (None, pos)."""
    best_kind: Optional[str] = None
    best_end = pos

    m = _EMAIL_RE.match(text, pos) if email else None
    if m:
        best_kind, best_end = TOKEN_EMAIL, m.end()

    for pattern in (_PHONE_RES if phone else []):
        m = pattern.match(text, pos)
        if m and m.end() > best_end:
            best_kind, best_end = TOKEN_PHONE, m.end()
            break

    return best_kind, best_end


class ContactRewriter:
    """Read-only view over a directory that rewrites identifiers to names."""

    def __init__(self, directory: ContactDirectory):
        self.directory = directory

    def rewrite(self, text: str) -> str:
        if not text:
            return text or ''

        parts = []
        replacements = 0

        for token in scan_tokens(text):
            if token.kind == TOKEN_PLAIN:
                parts.append(token.text)
                continue

            if token.kind == TOKEN_EMAIL:
                name = self.directory.lookup(token.text.lower())
            else:
                name = self.directory.lookup(token.text)

            if name:
                replacements += 1
                logger.debug(f"Replaced {token.kind} at offset {token.start}")
                parts.append(name)
            else:
                parts.append(token.text)

        if replacements:
            logger.info(f"Contact replacement: {replacements} replacements made")
        return ''.join(parts)


def rewrite_contacts(text: str, directory: ContactDirectory) -> str:
    """Convenience wrapper — one-off rewrite without keeping a rewriter."""
    return ContactRewriter(directory).rewrite(text)
