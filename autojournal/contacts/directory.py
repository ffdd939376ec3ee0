"""
autojournal/contacts/directory.py
In-memory contact directory: phone/email identifier → display name.

Built from a CSV export (identifier,name) or a VCF address-book dump.
Every load replaces the whole directory. The new maps are built aside and
swapped in with one assignment, so a lookup running during a reload sees
either the old snapshot or the new one, never a half-filled map.

Passed explicitly to the rewriter, namer and segmenter — there is no
module-level directory.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from autojournal.contacts.normalizer import clean_identifier, is_email, normalize_phone
from autojournal.parsers.encoding import read_text

logger = logging.getLogger(__name__)

CSV_HEADER = 'Phone Number/Email,Name'


class ContactFormatError(ValueError):
    """Contact file could not be read as CSV/VCF. Directory is unusable."""


class ContactDirectory:

    def __init__(self):
        # (phone_map, email_map) — replaced together, never mutated in place
        self._maps: Tuple[Dict[str, str], Dict[str, str]] = ({}, {})

    def __len__(self) -> int:
        phone_map, email_map = self._maps
        return len(phone_map) + len(email_map)

    @property
    def names(self) -> List[str]:
        """Distinct display names, in load order."""
        phone_map, email_map = self._maps
        return list(dict.fromkeys([*phone_map.values(), *email_map.values()]))

    # ── LOADING ──────────────────────────────────────────────

    def load_csv(self, text: str) -> None:
        """
        Replace the directory with the contents of a CSV export.
        Raises ContactFormatError if the header has fewer than two columns;
        the directory is left empty in that case.
        """
        self._maps = ({}, {})

        lines   = (text or '').splitlines()
        header  = lines[0] if lines else ''
        columns = [h.replace('"', '').strip() for h in header.split(',')]
        if len(columns) < 2:
            raise ContactFormatError("Invalid CSV format: header needs an identifier and a name column")

        phone_map: Dict[str, str] = {}
        email_map: Dict[str, str] = {}
        skipped = 0

        rows = [line for line in lines[1:] if line.strip()]
        for values in csv.reader(rows):
            values = [v.replace('"', '').strip() for v in values]
            if len(values) < 2 or not values[0] or not values[1]:
                skipped += 1
                continue

            contact, name = values[0], values[1]
            if is_email(contact):
                email_map[contact.lower()] = name
            elif not _has_digits(contact):
                skipped += 1
            else:
                for key in normalize_phone(contact):
                    phone_map[key] = name
                phone_map[clean_identifier(contact)] = name

        self._maps = (phone_map, email_map)
        logger.info(
            f"Contacts loaded: {len(phone_map)} phone keys, "
            f"{len(email_map)} emails ({skipped} rows skipped)"
        )

    def load_vcf(self, text: str) -> None:
        """
        Replace the directory with the contents of a vCard file.
        Cards are flattened to (contact, name) pairs and loaded as CSV.
        """
        pairs = parse_vcf_pairs(text)
        rows  = [f'{contact},"{name}"' for contact, name in pairs]
        self.load_csv('\n'.join([CSV_HEADER, *rows]))

    def load_file(self, path: Path) -> None:
        """Load a .vcf or .csv file. Other extensions raise ContactFormatError."""
        path   = Path(path)
        suffix = path.suffix.lower()
        if suffix not in ('.vcf', '.csv'):
            raise ContactFormatError(
                f"Unsupported contact file format: {path.name}. Use .vcf or .csv"
            )

        text = read_text(path)
        if suffix == '.vcf':
            self.load_vcf(text)
        else:
            self.load_csv(text)

    # ── LOOKUP ───────────────────────────────────────────────

    def lookup(self, identifier: str) -> Optional[str]:
        """Display name for a phone number or email, or None."""
        if not identifier:
            return None
        phone_map, email_map = self._maps

        if is_email(identifier):
            return email_map.get(identifier.lower())
        if not _has_digits(identifier):
            return None

        for key in normalize_phone(identifier):
            if key in phone_map:
                return phone_map[key]
        return phone_map.get(clean_identifier(identifier))


def _has_digits(identifier: str) -> bool:
    return any(c.isdigit() for c in identifier)


# ── VCF ──────────────────────────────────────────────────────

def parse_vcf_pairs(text: str) -> List[Tuple[str, str]]:
    """
    Scan vCard text for (contact, name) pairs.
    FN sets the current name; TEL/EMAIL lines attach to it until END:VCARD.
    Values without a current name are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    name: Optional[str] = None
    dropped = 0

    for line in (text or '').splitlines():
        line = line.strip()

        if line.startswith('FN:') or line.startswith('FN;'):
            name = line.split(':', 1)[1].replace('"', '').strip() if ':' in line else None
        elif 'TEL' in line:
            digits = ''.join(c for c in line.split(':')[-1] if c.isdigit())
            if name and digits:
                pairs.append((f'+{digits}', name))
            else:
                dropped += 1
        elif 'EMAIL' in line:
            email = line.split(':')[-1].strip()
            if name and email:
                pairs.append((email, name))
            else:
                dropped += 1
        elif line == 'END:VCARD':
            name = None

    if dropped:
        logger.debug(f"VCF: {dropped} phone/email lines without a usable name or value")
    return pairs

