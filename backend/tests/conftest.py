import sys
from pathlib import Path
from typing import List

# Ensure repository root is on sys.path so 'import backend' works
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Force pytest-anyio to use asyncio backend (avoid requiring 'trio')
import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"


class StubGenerator:
    """Records prompts and replays a canned completion (or raises)."""

    def __init__(self, reply: str = "", exc: Exception | None = None):
        self.reply = reply
        self.exc = exc
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.exc is not None:
            raise self.exc
        return self.reply


@pytest.fixture
def stub_generator():
    return StubGenerator
