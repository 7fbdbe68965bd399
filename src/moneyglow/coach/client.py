"""MoneyGlow coach: Claude calls for daily tips, chat and quiz challenges."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from datetime import date
from typing import Any

import anthropic

from moneyglow.coach import prompts
from moneyglow.config import Settings
from moneyglow.db.models import User

logger = logging.getLogger(__name__)

ChatTurn = dict[str, str]


class CoachClient:
    """Thin wrapper over ``anthropic.AsyncAnthropic``.

    Built once in the app lifespan and handed to routes through a dependency.
    Without an API key the client exists but ``configured`` is False.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        chat_max_tokens: int = 1024,
        advice_max_tokens: int = 400,
        challenge_max_tokens: int = 1500,
        client: Any = None,  # noqa: ANN401
    ) -> None:
        self.model = model
        self.chat_max_tokens = chat_max_tokens
        self.advice_max_tokens = advice_max_tokens
        self.challenge_max_tokens = challenge_max_tokens
        if client is not None:
            self.client = client
        elif api_key:
            self.client = anthropic.AsyncAnthropic(api_key=api_key)
        else:
            self.client = None

    @classmethod
    def from_settings(cls, settings: Settings) -> CoachClient:
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.coach_model,
            chat_max_tokens=settings.coach_chat_max_tokens,
            advice_max_tokens=settings.coach_advice_max_tokens,
            challenge_max_tokens=settings.coach_challenge_max_tokens,
        )

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def close(self) -> None:
        if self.client is not None and hasattr(self.client, "close"):
            await self.client.close()

    async def _complete(self, system: str, messages: Sequence[ChatTurn], max_tokens: int) -> str:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            system=system,
            messages=list(messages),
        )
        return "".join(block.text for block in response.content if block.type == "text")

    async def daily_advice(self, user: User, day: date) -> str:
        """One short tip, topic picked by day of month."""
        text = await self._complete(
            prompts.advice_system_prompt(user),
            [{"role": "user", "content": prompts.advice_user_prompt(user, day)}],
            self.advice_max_tokens,
        )
        logger.info("coach_advice_generated user=%s topic=%r", user.id, prompts.advice_topic(day))
        return text

    async def quiz_challenge(self, user: User, quiz_result: str) -> str:
        """A 30-day challenge in markdown for the user's money personality."""
        return await self._complete(
            prompts.challenge_system_prompt(user),
            [{"role": "user", "content": prompts.challenge_user_prompt(user, quiz_result)}],
            self.challenge_max_tokens,
        )

    async def stream_chat(self, user: User, history: Sequence[ChatTurn], message: str) -> AsyncIterator[str]:
        """Yield reply text chunks for ``message`` following ``history`` (oldest first)."""
        messages = [*history, {"role": "user", "content": message}]
        async with self.client.messages.stream(
            model=self.model,
            max_tokens=self.chat_max_tokens,
            system=prompts.chat_system_prompt(user),
            messages=messages,
        ) as stream:
            async for text in stream.text_stream:
                yield text
