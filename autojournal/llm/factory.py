"""
autojournal/llm/factory.py
Builds the configured summarizer backend from a config dict.
"""

import os
from typing import Any, Dict

from autojournal.llm.base import SummarizerAdapter
from autojournal.llm.ollama_adapter import OllamaAdapter
from autojournal.llm.openai_adapter import OpenAIAdapter


def build_adapter(config: Dict[str, Any]) -> SummarizerAdapter:
    if config.get('use_openai'):
        return OpenAIAdapter(
            api_key = config.get('openai_api_key') or os.environ.get('OPENAI_API_KEY', ''),
            model   = config.get('openai_model') or 'gpt-3.5-turbo',
        )
    return OllamaAdapter(
        model = config.get('ollama_model') or 'llama3.2',
        host  = config.get('ollama_url') or 'http://localhost:11434',
    )
