"""
Business profiles: one per industry, loaded once from a JSON document at startup.

Document shape (top-level object keyed by industry):
    {"real_estate": {"agent_name": ..., "industry_name": ..., "initial_greeting": "Hi {lead_name}!",
                     "qualifying_questions": [...], "qualification_rules": {"hot": ..., "cold": ..., "invalid": ...}}}
"""
import json
import logging
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.errors import ConfigError, UnknownIndustry

logger = logging.getLogger(__name__)

LEAD_NAME_PLACEHOLDER = "{lead_name}"


class QualificationRules(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    hot: str
    cold: str
    invalid: str


class BusinessProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    agent_name: str
    industry_name: str
    initial_greeting: str
    qualifying_questions: tuple[str, ...] = Field(..., min_length=1)
    qualification_rules: QualificationRules


def opening_message(profile: BusinessProfile, lead_name: str) -> str:
    """Greeting with the lead's name filled in, followed by the first qualifying question."""
    greeting = profile.initial_greeting.replace(LEAD_NAME_PLACEHOLDER, lead_name, 1)
    return f"{greeting} {profile.qualifying_questions[0]}"


class ProfileStore:
    """Read-only industry key -> BusinessProfile mapping."""

    def __init__(self, profiles: Mapping[str, BusinessProfile]):
        self._profiles = dict(profiles)

    def lookup(self, industry: str) -> BusinessProfile:
        try:
            return self._profiles[industry]
        except KeyError:
            raise UnknownIndustry(industry) from None

    def industries(self) -> list[str]:
        return list(self._profiles)

    def __contains__(self, industry: object) -> bool:
        return industry in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


def parse_profiles(data: object) -> ProfileStore:
    """Validate an already-decoded document. Raises ConfigError on any problem."""
    if not isinstance(data, dict):
        raise ConfigError("Business profiles document must be a JSON object keyed by industry")
    profiles = {}
    for industry, raw in data.items():
        try:
            profiles[industry] = BusinessProfile.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid business profile {industry!r}: {e}") from e
    return ProfileStore(profiles)


def load_profiles(source: str | Path) -> ProfileStore:
    """Read and validate the business profiles file. Raises ConfigError if missing or malformed."""
    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read business profiles from {path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Business profiles file {path} is not valid JSON: {e}") from e
    store = parse_profiles(data)
    logger.info("Loaded %d business profile(s) from %s: %s", len(store), path, ", ".join(store.industries()))
    return store
