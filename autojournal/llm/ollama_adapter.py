"""
autojournal/llm/ollama_adapter.py
Ollama backend adapter. Ollama runs locally and serves any model pulled
via `ollama pull <model>`.

INSTALL:
  macOS:  brew install ollama   (or https://ollama.com/download)
  Then:   ollama pull llama3.2
"""

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import List

from autojournal.llm.base import (
    RequestRejectedError,
    ServiceUnreachableError,
    SummarizerAdapter,
)

logger = logging.getLogger(__name__)


class OllamaAdapter(SummarizerAdapter):

    def __init__(
        self,
        model:       str = 'llama3.2',
        host:        str = 'http://localhost:11434',
        timeout_sec: int = 120,
    ):
        self.model       = model
        self.host        = host.rstrip('/')
        self.timeout_sec = timeout_sec

    def describe(self) -> str:
        return f"Ollama {self.model}"

    # ── AVAILABILITY CHECK ───────────────────────────────────
    def is_available(self) -> bool:
        """Ping Ollama and confirm the configured model is pulled."""
        try:
            models = self._fetch_models()
        except urllib.error.URLError:
            logger.warning(
                "Ollama not reachable at " + self.host +
                ". Start Ollama or check if it's running."
            )
            return False
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Ollama availability check failed: {e}")
            return False

        # Exact match or family match ("llama3.2" matches "llama3.2:latest")
        available = any(
            m == self.model or m.startswith(self.model.split(':')[0])
            for m in models
        )
        if not available:
            logger.warning(
                f"Model '{self.model}' not found in Ollama. "
                f"Available: {models}. "
                f"Run: ollama pull {self.model}"
            )
        return available

    # ── SUMMARY ──────────────────────────────────────────────
    def summarize(self, content: str) -> str:
        payload = json.dumps({
            'model':    self.model,
            'messages': self.build_messages(content),
            'stream':   False,
        }).encode('utf-8')

        req = urllib.request.Request(
            f"{self.host}/api/chat",
            data    = payload,
            headers = {'Content-Type': 'application/json'},
            method  = 'POST',
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_sec) as resp:
                raw = resp.read().decode('utf-8')
        except urllib.error.HTTPError as e:
            raise RequestRejectedError(f"Ollama API request failed: {e.code}", status=e.code) from e
        except urllib.error.URLError as e:
            raise ServiceUnreachableError(
                f"Ollama server is not accessible at {self.host}. Please start Ollama first."
            ) from e
        except http.client.HTTPException as e:
            raise ServiceUnreachableError(f"Ollama returned an incomplete response: {e!r}") from e
        except UnicodeDecodeError as e:
            raise RequestRejectedError("Ollama response is not valid UTF-8") from e
        except (TimeoutError, OSError) as e:
            raise ServiceUnreachableError(f"Ollama request failed: {e}") from e

        return self._parse_response(raw)

    # ── RESPONSE PARSER ──────────────────────────────────────
    def _parse_response(self, raw: str) -> str:
        try:
            data = json.loads(raw)
            text = data['message']['content']
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Could not parse Ollama response: {e}")
            raise RequestRejectedError("Malformed Ollama response") from e
        if not isinstance(text, str) or not text.strip():
            raise RequestRejectedError("Ollama returned an empty summary")
        return text.strip()

    # ── MODEL MANAGEMENT HELPERS ─────────────────────────────
    def list_available_models(self) -> List[str]:
        """Return list of locally available Ollama model names. Empty if unreachable."""
        try:
            return self._fetch_models()
        except (OSError, ValueError, KeyError):
            return []

    def _fetch_models(self) -> List[str]:
        req = urllib.request.Request(f"{self.host}/api/tags", method='GET')
        with urllib.request.urlopen(req, timeout=5) as resp:
            data = json.loads(resp.read().decode())
        return [m['name'] for m in data.get('models', [])]
