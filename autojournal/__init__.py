"""
autojournal — message transcripts to a contact-resolved daily journal.
"""

__version__ = "1.0.0"
