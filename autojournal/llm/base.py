"""
autojournal/llm/base.py
Abstract base class for all summarizer backends.
To add a new backend: subclass SummarizerAdapter and implement
is_available(), summarize() and describe().
"""

from abc import ABC, abstractmethod
from typing import Dict, List


SUMMARY_SYSTEM_PROMPT = """you're helping me summarize a chunk of an iMessage conversation

below is part of the transcript. each message includes:
\t•\ta timestamp
\t•\tthe sender's name ("Me" means a message from me. others are labeled with their names)
\t•\tthe message text
\t•\tsometimes: tapback reactions (e.g. "Loved by …", "Laughed by …")

it might be a group convo with 3 or more people

read it and give me a one to two sentence summary, in second-person, saying who you were talking to and what it was about. Use natural language like you're casually recounting what the convo was about. Don't introduce the summary. Don't refer to anyone as "they said" or "you said" — just use natural language.

here's the conversation:"""


class SummarizerError(Exception):
    """Summary could not be produced for one conversation."""


class ServiceUnreachableError(SummarizerError):
    """Backend not reachable: connection refused, DNS failure, timeout."""


class RequestRejectedError(SummarizerError):
    """Backend answered but refused the request or returned an unusable body."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class SummarizerAdapter(ABC):
    """
    All summarizer backends implement this interface.
    The batch summarizer calls summarize() and gets back plain text.
    The caller never knows which backend is running.
    """

    model: str = ''

    @abstractmethod
    def is_available(self) -> bool:
        """
        Returns True if the backend is reachable and ready.
        Never raises.
        """
        ...

    @abstractmethod
    def summarize(self, content: str) -> str:
        """
        Summarize one conversation body.
        Raises ServiceUnreachableError or RequestRejectedError on failure.
        """
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable backend + model label, e.g. 'Ollama llama3.2'."""
        ...

    def build_messages(self, content: str) -> List[Dict[str, str]]:
        """Chat payload shared by every chat-completions style backend."""
        return [
            {'role': 'system', 'content': SUMMARY_SYSTEM_PROMPT},
            {'role': 'user',   'content': content},
        ]
