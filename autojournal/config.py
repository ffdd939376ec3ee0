"""
autojournal/config.py
Settings with auto-detection. Persists to autojournal_config.json in the
project root. Missing keys fall back to DEFAULT_CONFIG.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "autojournal_config.json"

DEFAULT_CONFIG = {
    "contacts_path": "",
    "output_path": "Autojournal",
    "filename_template": "Daily Journal {date}",
    "heading_template": "# Daily Journal - {date}",
    "use_openai": False,
    "openai_api_key": "",
    "openai_model": "gpt-3.5-turbo",
    "ollama_model": "llama3.2",
    "ollama_url": "http://localhost:11434",
    "imessage_exporter_path": "/opt/homebrew/bin/imessage-exporter",
}

# Checked in order under output_path when contacts_path is unset
DEFAULT_CONTACT_FILES = ["contacts.vcf", "contacts.csv"]


def _config_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path.cwd()
    return root / CONFIG_FILENAME


def resolve_path(value: str, project_root: Optional[Path] = None) -> Path:
    """Relative config paths are relative to the project root."""
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return (project_root or Path.cwd()) / path


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load config from autojournal_config.json. Returns defaults if missing."""
    path = _config_path(project_root)
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Config load failed: {e}")
    return dict(DEFAULT_CONFIG)


def save_config(config: Dict[str, Any], project_root: Optional[Path] = None) -> Path:
    """Persist config to autojournal_config.json."""
    path = _config_path(project_root)
    path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    return path


def auto_detect_contacts(
    project_root: Optional[Path] = None,
    output_path: str = DEFAULT_CONFIG["output_path"],
) -> Optional[Path]:
    """Look for contacts.vcf, then contacts.csv, in the output folder."""
    base = resolve_path(output_path, project_root)
    for name in DEFAULT_CONTACT_FILES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def ensure_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load config and auto-detect contacts_path if not set.
    The detected path is persisted so later runs skip detection.
    """
    config = load_config(project_root)
    if not config.get("contacts_path"):
        detected = auto_detect_contacts(project_root, config.get("output_path", ""))
        if detected:
            root = project_root or Path.cwd()
            try:
                config["contacts_path"] = str(detected.relative_to(root))
            except ValueError:
                config["contacts_path"] = str(detected)
            save_config(config, project_root)
            logger.info(f"Auto-configured contacts path to {config['contacts_path']}")
    return config
