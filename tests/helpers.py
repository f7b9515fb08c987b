"""Test doubles shared across the suite."""

import re
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

from langchain_core.messages import AIMessageChunk

ADDRESS = "0xAbC0000000000000000000000000000000000123"
WIN_REPLY = "Yes, it is a surfboard! Congratulations! Please provide an Ethereum address to receive your prize"


class FakeChatModel:
    """Stands in for ChatGroq: records prompts and streams a canned reply."""

    def __init__(self, reply: str = "Yes (19 questions left)", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[List[Any]] = []

    async def astream(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        for piece in re.findall(r"\S+\s*", self.reply):
            yield AIMessageChunk(content=piece)


def make_response(status_code: int, body: Any) -> MagicMock:
    """requests.Response look-alike."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = body
    response.text = str(body)
    return response


def turn(role: str, content: str) -> Dict[str, str]:
    return {"role": role, "content": content}
