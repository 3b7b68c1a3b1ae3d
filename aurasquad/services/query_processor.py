"""
QueryProcessor — classify a free-text query and dispatch to a squad template.

Each query ends in one of three branches:

- GREETING: a welcome reply with the guide template
- CONVERSATIONAL: an advice reply with the support template
- SQUAD_MATCH: a squad template from the static table plus a personalized
  message from a second model call

Classification is strict: rate limits are retried with linear backoff, a
non-JSON reply raises ClassificationError and other model failures
propagate. Only the personalization call degrades to a fixed message.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from aurasquad.core.errors import ClassificationError, LLMError, RateLimitedError
from aurasquad.core.protocols import TextLLMClient
from aurasquad.infra.retry import linear_backoff, retry_async, retry_on

from . import prompts
from .analytics import AnalyticsService
from .templates import (
    DEFAULT_CONVERSATIONAL_REPLY,
    DEFAULT_GREETING,
    GREETING_TEMPLATE,
    SUPPORT_TEMPLATE,
    SquadTemplate,
    SquadType,
    get_template,
)

logger = logging.getLogger(__name__)


class QueryBranch(str, Enum):
    GREETING = "greeting"
    CONVERSATIONAL = "conversational"
    SQUAD_MATCH = "squad_match"


@dataclass
class QueryRequest:
    user_id: str
    query: str


@dataclass
class QueryAnalysis:
    branch: QueryBranch
    user_intent: str
    squad_type: SquadType = SquadType.PROBLEM_SOLVING
    greeting_response: Optional[str] = None
    conversational_response: Optional[str] = None
    squad_description: Optional[str] = None
    advice: Optional[str] = None


@dataclass
class SquadResponse:
    branch: QueryBranch
    message: str
    squad_suggestion: SquadTemplate
    action_text: str
    squad_type: Optional[SquadType] = None
    advice: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "branch": self.branch.value,
            "message": self.message,
            "squad_suggestion": self.squad_suggestion.to_dict(),
            "action_text": self.action_text,
            "squad_type": self.squad_type.value if self.squad_type else None,
            "advice": self.advice,
        }


def strip_code_fence(text: str) -> str:
    """Strip markdown code fences (```json ... ```) from model output."""
    stripped = text.strip()
    match = re.match(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", stripped, re.DOTALL)
    if match:
        return match.group(1).strip()
    return stripped


def parse_analysis(raw_output: str, query: str) -> QueryAnalysis:
    cleaned = strip_code_fence(raw_output)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse classification reply: %s", cleaned[:300])
        raise ClassificationError("Invalid AI response format") from e
    if not isinstance(parsed, dict):
        raise ClassificationError("Classification reply is not a JSON object")

    if parsed.get("isGreeting"):
        branch = QueryBranch.GREETING
    elif parsed.get("isConversational"):
        branch = QueryBranch.CONVERSATIONAL
    else:
        branch = QueryBranch.SQUAD_MATCH

    return QueryAnalysis(
        branch=branch,
        user_intent=parsed.get("userIntent") or query,
        squad_type=SquadType.from_tag(parsed.get("squadType")),
        greeting_response=parsed.get("greetingResponse"),
        conversational_response=parsed.get("conversationalResponse"),
        squad_description=parsed.get("squadDescription"),
        advice=parsed.get("advice"),
    )


class QueryProcessor:
    def __init__(
        self,
        llm: TextLLMClient,
        analytics: Optional[AnalyticsService] = None,
        max_retries: int = 5,
        retry_delay: float = 2.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._llm = llm
        self._analytics = analytics
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._sleep = sleep

    async def _complete(self, prompt: str, system_prompt: Optional[str] = None, label: str = "llm") -> str:
        return await retry_async(
            lambda: self._llm.complete(prompt, system_prompt),
            should_retry=retry_on(RateLimitedError),
            max_retries=self._max_retries,
            delay_schedule=linear_backoff(self._retry_delay),
            sleep=self._sleep,
            label=label,
        )

    async def analyze_query(self, query: str) -> QueryAnalysis:
        raw = await self._complete(prompts.classification_prompt(query), label="classify")
        analysis = parse_analysis(raw, query)
        logger.info("Query classified: branch=%s squad_type=%s",
                    analysis.branch.value, analysis.squad_type.value)
        return analysis

    async def generate_squad_message(self, user_intent: str, template: SquadTemplate) -> str:
        fallback = prompts.SQUAD_MESSAGE_FALLBACK.format(
            squad_name=template.squad_name, squad_description=template.description,
        )
        try:
            text = await self._complete(
                prompts.squad_message_prompt(user_intent, template.squad_name),
                label="squad_message",
            )
        except LLMError as e:
            logger.warning("Squad message generation failed, using fallback: %s", e)
            return fallback
        return text.strip() or fallback

    async def converse(self, message: str) -> str:
        text = await self._complete(
            f"User message: {message}",
            system_prompt=prompts.CONVERSATIONAL_SYSTEM_PROMPT,
            label="converse",
        )
        return text.strip() or prompts.CONVERSATIONAL_FALLBACK

    async def process_query(self, request: QueryRequest) -> SquadResponse:
        analysis = await self.analyze_query(request.query)

        if analysis.branch == QueryBranch.GREETING:
            response = SquadResponse(
                branch=analysis.branch,
                message=analysis.greeting_response or DEFAULT_GREETING,
                squad_suggestion=GREETING_TEMPLATE,
                action_text="Tell me what you need!",
                advice=analysis.advice,
            )
        elif analysis.branch == QueryBranch.CONVERSATIONAL:
            response = SquadResponse(
                branch=analysis.branch,
                message=analysis.conversational_response or DEFAULT_CONVERSATIONAL_REPLY,
                squad_suggestion=SUPPORT_TEMPLATE,
                action_text="Form Support Squad",
                advice=analysis.advice,
            )
        else:
            template = get_template(analysis.squad_type)
            response = SquadResponse(
                branch=analysis.branch,
                message=await self.generate_squad_message(analysis.user_intent, template),
                squad_suggestion=template,
                action_text=f'Form "{template.squad_name}" Squad',
                squad_type=analysis.squad_type,
                advice=analysis.advice,
            )

        if self._analytics is not None:
            category = response.squad_type.value if response.squad_type else response.branch.value
            await self._analytics.record_query(request.user_id, category)
            await self._analytics.track_user(request.user_id)
        return response
