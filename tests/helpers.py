"""Test data and a stub completion client shared by the test modules."""

import asyncio
import json
from typing import Optional

from langchain_core.messages import AIMessage

PROFILES = {
    "real_estate": {
        "agent_name": "Riya",
        "industry_name": "Real Estate",
        "initial_greeting": "Hi {lead_name}, welcome!",
        "qualifying_questions": ["What's your budget?", "Where are you looking?"],
        "qualification_rules": {
            "hot": "Budget above 1 crore and buying this quarter.",
            "cold": "Just browsing.",
            "invalid": "Spam or gibberish.",
        },
    },
}


def completion_json(
    reply: str = "Great! Which area are you looking in?",
    classification: str = "Cold",
    metadata: Optional[dict] = None,
) -> str:
    return json.dumps(
        {
            "reply": reply,
            "classification": classification,
            "metadata": {"Budget": "50 lakh"} if metadata is None else metadata,
        }
    )


class StubLLM:
    """Stands in for the completion client: records calls, returns canned content, raises, or stalls."""

    def __init__(self, content: str = "", error: Optional[Exception] = None, delay: float = 0.0):
        self.content = content or completion_json()
        self.error = error
        self.delay = delay
        self.calls: list[list] = []

    async def ainvoke(self, messages):
        self.calls.append(list(messages))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)
