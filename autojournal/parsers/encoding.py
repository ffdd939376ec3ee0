"""
autojournal/parsers/encoding.py
BOM-aware text reading for exported transcripts and contact files.

Exporters and address books write UTF-8, UTF-8-BOM or UTF-16 depending on
platform and version. Tries the BOM first, then strict UTF-8, then UTF-8
with replacement so a stray byte never aborts a run.
"""

from pathlib import Path

BOM_UTF8     = b'\xef\xbb\xbf'
BOM_UTF16_LE = b'\xff\xfe'
BOM_UTF16_BE = b'\xfe\xff'


def read_text(path: Path) -> str:
    raw = Path(path).read_bytes()
    if raw.startswith(BOM_UTF8):
        return raw[len(BOM_UTF8):].decode('utf-8', errors='replace')
    if raw.startswith(BOM_UTF16_LE):
        return raw[len(BOM_UTF16_LE):].decode('utf-16-le', errors='replace')
    if raw.startswith(BOM_UTF16_BE):
        return raw[len(BOM_UTF16_BE):].decode('utf-16-be', errors='replace')
    try:
        return raw.decode('utf-8', errors='strict')
    except UnicodeDecodeError:
        return raw.decode('utf-8', errors='replace')
