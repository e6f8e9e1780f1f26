"""
Lead qualification agent: one inbound message in, one structured completion out.

The completion API is asked for a single JSON object {"reply", "classification", "metadata"}.
Session state lives in SessionStore; this module only reads and appends through it.
"""
import asyncio
import json
import logging
from typing import Any, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_nvidia_ai_endpoints import ChatNVIDIA
from pydantic import ValidationError

from app.core.config import Settings
from app.core.errors import (
    CompletionProviderFailure,
    CompletionTimeout,
    MalformedCompletion,
    SessionNotFound,
)
from app.core.profiles import BusinessProfile, ProfileStore, opening_message
from app.core.sessions import ConversationTurn, SessionStore
from app.models.schemas import StructuredCompletion

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = """You are {agent_name}, an expert sales assistant for the {industry_name} industry. Your goal is to qualify a lead by being conversational and asking relevant questions.
Qualification Rules:
- Hot: {hot}
- Cold: {cold}
- Invalid: {invalid}

Based on the entire conversation, generate your next conversational response. After the response, you MUST classify the lead and extract key metadata.
Your final output must be a single, valid JSON object with three keys: "reply" (string), "classification" (string), and "metadata" (object mapping strings to strings).
Example: {{"reply": "Great! What is your budget?", "classification": "Cold", "metadata": {{"Location": "Pune"}}}}"""


def build_system_prompt(profile: BusinessProfile) -> str:
    """Persona, qualification rules and output format for one business profile. No I/O."""
    rules = profile.qualification_rules
    return SYSTEM_PROMPT_TEMPLATE.format(
        agent_name=profile.agent_name,
        industry_name=profile.industry_name,
        hot=rules.hot,
        cold=rules.cold,
        invalid=rules.invalid,
    )


_LC_MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


def to_lc_messages(system_prompt: str, transcript: Sequence[ConversationTurn]) -> list[BaseMessage]:
    """System instruction first, then the transcript in order."""
    messages: list[BaseMessage] = [SystemMessage(content=system_prompt)]
    for turn in transcript:
        messages.append(_LC_MESSAGE_TYPES[turn.role](content=turn.content))
    return messages


def _strip_code_fences(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped[3:]
        if stripped.startswith("json"):
            stripped = stripped[len("json"):]
        stripped = stripped.rstrip()
        if stripped.endswith("```"):
            stripped = stripped[:-3]
    return stripped.strip()


def parse_completion(text: str) -> StructuredCompletion:
    """Parse and validate the model's answer. Raises MalformedCompletion on anything unexpected."""
    try:
        data = json.loads(_strip_code_fences(text))
    except (ValueError, RecursionError) as e:
        raise MalformedCompletion(f"Completion is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedCompletion(f"Completion must be a JSON object, got {type(data).__name__}")
    try:
        return StructuredCompletion.model_validate(data)
    except ValidationError as e:
        raise MalformedCompletion(f"Completion does not match the expected shape: {e}") from e


def build_llm(settings: Settings):
    """ChatNVIDIA client constrained to JSON-object output. Raises ConfigError without an API key."""
    llm = ChatNVIDIA(
        model=settings.nvidia_model,
        nvidia_api_key=settings.require_api_key(),
        temperature=settings.llm_temperature,
    )
    return llm.bind(response_format={"type": "json_object"})


def _content_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        # Some providers return content blocks; keep the text parts.
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    if not isinstance(content, str):
        raise MalformedCompletion(f"Completion has no text content: {content!r}")
    return content


class ChatOrchestrator:
    """Starts and continues lead conversations against the completion API."""

    def __init__(
        self,
        profiles: ProfileStore,
        sessions: SessionStore,
        llm: Any,
        timeout_seconds: float = 30.0,
    ):
        self.profiles = profiles
        self.sessions = sessions
        self.llm = llm
        self.timeout_seconds = timeout_seconds

    def start_chat(self, session_key: str, industry: str, lead_name: str) -> tuple[str, list[ConversationTurn]]:
        profile = self.profiles.lookup(industry)
        reply = opening_message(profile, lead_name)
        history = self.sessions.start_session(session_key, reply)
        logger.info("New chat started for %s (%s), industry=%s", lead_name, session_key, industry)
        return reply, history

    async def continue_chat(self, session_key: str, industry: str, message: str) -> StructuredCompletion:
        """
        Record the lead's message, ask the model for the next turn, record and return its reply.

        The user turn stays recorded if the completion fails; nothing is retried.
        """
        # Existence first: an unstarted session must never reach the completion API.
        if not self.sessions.has_session(session_key):
            raise SessionNotFound(session_key)
        async with self.sessions.lock(session_key):
            profile = self.profiles.lookup(industry)
            generation = self.sessions.generation(session_key)
            transcript = self.sessions.append_user_turn(session_key, message)

            messages = to_lc_messages(build_system_prompt(profile), transcript)
            logger.info("Calling completion API for %s (%d turns)", session_key, len(transcript))
            raw = await self._complete(messages)
            completion = parse_completion(_content_text(raw))

            # A restart while waiting on the model started a new conversation; keep the reply out of it.
            self.sessions.append_assistant_turn(session_key, completion.reply, generation=generation)

        logger.info(
            "Lead %s classified %s; metadata=%s", session_key, completion.classification, completion.metadata
        )
        return completion

    async def _complete(self, messages: list[BaseMessage]) -> Any:
        try:
            return await asyncio.wait_for(self.llm.ainvoke(messages), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise CompletionTimeout(self.timeout_seconds) from None
        except Exception as e:
            raise CompletionProviderFailure(f"Completion API call failed: {e}") from e
