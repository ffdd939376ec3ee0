"""
autojournal/naming/conversation_namer.py
Turns an exported conversation filename into a display name.

Exporters name each thread file after whatever identifies it: a chat title
("Family Group"), a single handle (+15551234567, bob@example.com), or the
participant list of a group chat (+15551234567_+15557654321). Classification
is an ordered list of rules; the first rule that claims the name wins:

  1. Meaningful     already a human label — kept as-is
  2. GroupChat      two or more phone/email participants
  3. SingleContact  one phone number or email
  4. Unknown        anything else — kept as-is

resolve_name() never raises; the worst case is the input unchanged.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from autojournal.contacts.directory import ContactDirectory
from autojournal.contacts.normalizer import is_email

logger = logging.getLogger(__name__)

GROUP_KEYWORDS = (
    'team', 'group', 'family', 'friends', 'work',
    'class', 'project', 'club', 'crew', 'squad',
)

# A participant phone token needs at least this many digits. Shorter digit
# runs are pieces of one formatted number ("+1 555-123-4567").
MIN_PARTICIPANT_DIGITS = 7

_HAS_LETTER     = re.compile(r'[a-zA-Z]')
_HAS_SPACE      = re.compile(r'\s')
_SINGLE_WORD    = re.compile(r'^[a-zA-Z]+$')
_GROUP_KEYWORD  = re.compile('|'.join(GROUP_KEYWORDS), re.IGNORECASE)
_DELIMITERS     = re.compile(r'[,;\s_\-]+')
_PHONE_TOKEN    = re.compile(r'^[\d+()]+$')
_SINGLE_PHONE   = re.compile(r'^[\d\s+\-()]+$')
_EMAIL_TOKEN    = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


# ── CLASSIFICATION RESULT ────────────────────────────────────

@dataclass(frozen=True)
class Meaningful:
    name: str


@dataclass(frozen=True)
class GroupChat:
    participants: Tuple[str, ...]


@dataclass(frozen=True)
class SingleContact:
    identifier: str


@dataclass(frozen=True)
class Unknown:
    raw: str


NameClassification = Union[Meaningful, GroupChat, SingleContact, Unknown]


# ── RULES ────────────────────────────────────────────────────

def _meaningful_rule(raw: str) -> Optional[NameClassification]:
    if _HAS_LETTER.search(raw) and _HAS_SPACE.search(raw):
        return Meaningful(raw)
    if _SINGLE_WORD.match(raw):
        return Meaningful(raw)
    if _GROUP_KEYWORD.search(raw):
        return Meaningful(raw)
    return None


def _group_chat_rule(raw: str) -> Optional[NameClassification]:
    participants = tuple(t for t in _DELIMITERS.split(raw) if _is_participant(t))
    if len(participants) >= 2:
        return GroupChat(participants)
    return None


def _single_contact_rule(raw: str) -> Optional[NameClassification]:
    if _SINGLE_PHONE.match(raw) or is_email(raw):
        return SingleContact(raw)
    return None


RULES: List[Tuple[str, Callable[[str], Optional[NameClassification]]]] = [
    ('meaningful',     _meaningful_rule),
    ('group_chat',     _group_chat_rule),
    ('single_contact', _single_contact_rule),
]


def _is_participant(token: str) -> bool:
    if _EMAIL_TOKEN.match(token):
        return True
    if _PHONE_TOKEN.match(token):
        return sum(c.isdigit() for c in token) >= MIN_PARTICIPANT_DIGITS
    return False


def classify_name(raw: str) -> NameClassification:
    """Apply RULES in order; Unknown if none claims the name."""
    for _label, rule in RULES:
        result = rule(raw)
        if result is not None:
            return result
    return Unknown(raw)


# ── RESOLUTION ───────────────────────────────────────────────

def resolve_name(raw: str, directory: ContactDirectory) -> str:
    """Display name for an exported conversation filename."""
    if not raw:
        return raw or ''

    kind = classify_name(raw)

    if isinstance(kind, GroupChat):
        name = group_chat_name(kind.participants, directory)
        logger.debug(f"Group chat with {len(kind.participants)} participants named")
        return name

    if isinstance(kind, SingleContact):
        return directory.lookup(kind.identifier) or raw

    # Meaningful / Unknown
    return raw


def group_chat_name(participants: Tuple[str, ...], directory: ContactDirectory) -> str:
    """
    Name a group chat after its participants.
    Unresolved phones show their last 4 digits, unresolved emails their local part.
    """
    names: List[str] = []
    for participant in participants:
        name = directory.lookup(participant)
        if not name:
            name = participant.split('@')[0] if is_email(participant) else participant[-4:]
        if name:
            names.append(name)

    if not names:
        return f"Group Chat ({len(participants)} participants)"
    if len(names) == 1:
        return f"{names[0]} & Others"
    if len(names) <= 3:
        return ', '.join(names)
    return f"{', '.join(names[:2])} & {len(names) - 2} others"
