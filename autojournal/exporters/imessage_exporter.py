"""
autojournal/exporters/imessage_exporter.py
Thin wrapper around the imessage-exporter CLI (macOS only).

  brew install imessage-exporter

Writes one .txt file per thread into <output_path>/<MM_DD>/, which
parsers/transcript_parser.build_combined_transcript then stitches together.
No shell: the command is run as an argv list.
"""

import logging
import re
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

EXPORT_TIMEOUT_SEC = 300

COMMON_EXPORTER_PATHS = [
    '/opt/homebrew/bin/imessage-exporter',
    '/usr/local/bin/imessage-exporter',
    '/usr/bin/imessage-exporter',
]

_VERSION_RE = re.compile(r'\d+\.\d+\.\d+')


@dataclass
class ExportResult:
    success: bool
    stdout:  str = ''
    stderr:  str = ''
    error:   str = ''


@dataclass
class ExporterStatus:
    installed: bool
    version:   str           = ''
    error:     str           = ''
    path:      Optional[str] = None


def build_export_command(
    exporter_path: str,
    output_dir:    Path,
    start_date:    str,
    end_date:      str,
) -> List[str]:
    """argv for a plain-text export of [start_date, end_date)."""
    return [
        str(exporter_path),
        '-f', 'txt',
        '-o', str(output_dir),
        '-s', start_date,
        '-e', end_date,
        '-a', 'macOS',
    ]


def format_export_command(argv: List[str]) -> str:
    """Shell-quoted form for copy/paste into a terminal."""
    return shlex.join(argv)


def run_export(
    exporter_path: str,
    output_dir:    Path,
    start_date:    str,
    end_date:      str,
    timeout_sec:   int = EXPORT_TIMEOUT_SEC,
) -> ExportResult:
    """Run the exporter. Never raises — failure is reported in ExportResult."""
    if not Path(exporter_path).exists():
        return ExportResult(
            success = False,
            error   = (
                f"iMessage exporter not found at: {exporter_path}. "
                "Install it with 'brew install imessage-exporter' and check the path in config."
            ),
        )

    argv = build_export_command(exporter_path, output_dir, start_date, end_date)
    logger.info(f"Running iMessage exporter: {format_export_command(argv)}")

    try:
        proc = subprocess.run(argv, capture_output=True, text=True, timeout=timeout_sec)
    except subprocess.TimeoutExpired:
        return ExportResult(success=False, error=f"Export timed out after {timeout_sec}s")
    except OSError as e:
        logger.error(f"Failed to execute exporter: {e}")
        return ExportResult(success=False, error=str(e))

    if proc.returncode != 0:
        logger.error(f"Exporter exited with status {proc.returncode}")
        return ExportResult(
            success = False,
            stdout  = proc.stdout or '',
            stderr  = proc.stderr or '',
            error   = f"Exporter exited with status {proc.returncode}",
        )

    logger.info("iMessage export completed successfully")
    return ExportResult(success=True, stdout=proc.stdout or '', stderr=proc.stderr or '')


def check_exporter(exporter_path: str) -> ExporterStatus:
    """Probe `--version` at the configured path, then at common install paths."""
    version = _probe_version(exporter_path)
    if version is not None:
        return ExporterStatus(installed=True, version=version, path=exporter_path)

    for path in COMMON_EXPORTER_PATHS:
        if path == exporter_path:
            continue
        version = _probe_version(path)
        if version is not None:
            return ExporterStatus(
                installed = True,
                version   = version,
                path      = path,
                error     = f"Found at {path} instead of configured path",
            )

    return ExporterStatus(installed=False, error=f"imessage-exporter not found at {exporter_path}")


def _probe_version(path: str) -> Optional[str]:
    try:
        proc = subprocess.run([path, '--version'], capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.TimeoutExpired):
        return None
    if proc.returncode != 0 and 'imessage-exporter' not in (proc.stdout or ''):
        return None
    match = _VERSION_RE.search(proc.stdout or '')
    return match.group(0) if match else 'unknown'
