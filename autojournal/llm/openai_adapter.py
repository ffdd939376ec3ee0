"""
autojournal/llm/openai_adapter.py
OpenAI chat-completions backend. Needs an API key in config
(openai_api_key) or the OPENAI_API_KEY environment variable.

Conversation text leaves the machine with this backend. Use Ollama to keep
everything local.
"""

import http.client
import json
import logging
import urllib.error
import urllib.request

from autojournal.llm.base import (
    RequestRejectedError,
    ServiceUnreachableError,
    SummarizerAdapter,
)

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = 'https://api.openai.com/v1/chat/completions'


class OpenAIAdapter(SummarizerAdapter):

    def __init__(
        self,
        api_key:     str,
        model:       str   = 'gpt-3.5-turbo',
        url:         str   = OPENAI_CHAT_URL,
        timeout_sec: int   = 60,
        temperature: float = 0.7,
        max_tokens:  int   = 500,
    ):
        self.api_key     = api_key
        self.model       = model
        self.url         = url
        self.timeout_sec = timeout_sec
        self.temperature = temperature
        self.max_tokens  = max_tokens

    def describe(self) -> str:
        return f"OpenAI {self.model}"

    def is_available(self) -> bool:
        # No cheap unauthenticated ping; a configured key is the best signal.
        if not self.api_key:
            logger.warning("OpenAI API key not configured")
            return False
        return True

    def summarize(self, content: str) -> str:
        if not self.api_key:
            raise RequestRejectedError("OpenAI API key not configured")

        payload = json.dumps({
            'model':       self.model,
            'messages':    self.build_messages(content),
            'temperature': self.temperature,
            'max_tokens':  self.max_tokens,
        }).encode('utf-8')

        req = urllib.request.Request(
            self.url,
            data    = payload,
            headers = {
                'Content-Type':  'application/json',
                'Authorization': f'Bearer {self.api_key}',
            },
            method  = 'POST',
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_sec) as resp:
                raw = resp.read().decode('utf-8')
        except urllib.error.HTTPError as e:
            raise RequestRejectedError(f"OpenAI API request failed: {e.code}", status=e.code) from e
        except urllib.error.URLError as e:
            raise ServiceUnreachableError(f"OpenAI API not reachable: {e.reason}") from e
        except http.client.HTTPException as e:
            raise ServiceUnreachableError(f"OpenAI returned an incomplete response: {e!r}") from e
        except UnicodeDecodeError as e:
            raise RequestRejectedError("OpenAI response is not valid UTF-8") from e
        except (TimeoutError, OSError) as e:
            raise ServiceUnreachableError(f"OpenAI request failed: {e}") from e

        try:
            data = json.loads(raw)
            text = data['choices'][0]['message']['content']
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Could not parse OpenAI response: {e}")
            raise RequestRejectedError("Malformed OpenAI response") from e

        if not isinstance(text, str) or not text.strip():
            raise RequestRejectedError("OpenAI returned an empty summary")
        return text.strip()
