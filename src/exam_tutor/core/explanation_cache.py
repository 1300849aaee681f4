"""
Explanation cache with at-most-once generation per question.

Each question id maps to a single asyncio task. Concurrent requests for
the same id await that task instead of starting another generation, and
a failed generation settles to the fallback text so no slot stays
in flight forever.
"""
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

from src.exam_tutor import config

logger = logging.getLogger(__name__)


class ExplanationStatus(str, Enum):
    MISSING = "missing"
    PENDING = "pending"
    CACHED = "cached"


class ExplanationCache:
    """Write-once store of explanations for one quiz session."""

    def __init__(self, fallback: Optional[str] = None):
        self.fallback = fallback or config.FALLBACK_EXPLANATION
        self._entries: Dict[int, "asyncio.Task[str]"] = {}

    def __contains__(self, question_id: int) -> bool:
        return question_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def status(self, question_id: int) -> ExplanationStatus:
        task = self._entries.get(question_id)
        if task is None:
            return ExplanationStatus.MISSING
        if task.done():
            return ExplanationStatus.CACHED
        return ExplanationStatus.PENDING

    def get(self, question_id: int) -> Optional[str]:
        """Return the cached explanation, or None when missing or still pending."""
        task = self._entries.get(question_id)
        if task is None or not task.done():
            return None
        return task.result()

    async def ensure(
        self,
        question_id: int,
        generator: Callable[[], Awaitable[str]]
    ) -> str:
        """
        Return the explanation for a question, generating it at most once.

        Args:
            question_id: Question identity within the current quiz
            generator: Coroutine factory producing the explanation text.
                Only invoked when no entry exists for question_id.

        Returns:
            The cached text, or the fallback text if generation failed
        """
        task = self._entries.get(question_id)
        if task is None:
            logger.info(f"Explanation cache MISS for question {question_id}")
            task = asyncio.ensure_future(self._generate(question_id, generator))
            self._entries[question_id] = task
        else:
            logger.debug(f"Explanation cache HIT for question {question_id}")

        # Shielded so an abandoned caller does not cancel the shared generation.
        return await asyncio.shield(task)

    async def _generate(
        self,
        question_id: int,
        generator: Callable[[], Awaitable[str]]
    ) -> str:
        try:
            return await generator()
        except (Exception, asyncio.CancelledError) as e:
            logger.error(f"Explanation generation failed for question {question_id}: {e}")
            return self.fallback

    def clear(self) -> None:
        """Forget every entry. Called when a new quiz is loaded."""
        if self._entries:
            logger.info(f"Clearing {len(self._entries)} cached explanation(s)")
        self._entries.clear()
