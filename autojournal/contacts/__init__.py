"""
autojournal.contacts — phone/email normalization, the contact directory,
and in-text identifier replacement.
"""

from autojournal.contacts.directory import ContactDirectory, ContactFormatError
from autojournal.contacts.normalizer import normalize_phone
from autojournal.contacts.rewriter import ContactRewriter, rewrite_contacts

__all__ = [
    "ContactDirectory",
    "ContactFormatError",
    "ContactRewriter",
    "normalize_phone",
    "rewrite_contacts",
]
