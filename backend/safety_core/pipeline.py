"""
Ingredient analysis pipeline: tokenize -> lookup + classify -> assemble -> aggregate.

Lookups are the only I/O. They run in worker threads, bounded by a semaphore,
and results are put back in tokenizer order. Each run carries a RunToken;
starting a new run on the same analyzer cancels the previous run's token and
task, so a superseded run can never hand back a result.
"""
import asyncio
import logging
from enum import Enum
from typing import List, Optional

from safety_core.config import get_lookup_concurrency
from safety_core.evaluation.aggregator import aggregate
from safety_core.evaluation.assembler import assemble
from safety_core.external_apis import RunToken, SafetyResolver, resolve_safety_data
from safety_core.models.ingredient import AnalysisResult, AuthoritativeData
from safety_core.normalization.tokenizer import tokenize

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter at least one ingredient to analyze."


class InvalidIngredientInput(ValueError):
    """Raised before any lookup when the submission holds no candidate ingredients."""


class AnalysisSuperseded(Exception):
    """Raised to the caller of a run that was replaced by a newer submission."""

    def __init__(self, generation: int):
        super().__init__(f"analysis run {generation} was superseded by a newer submission")
        self.generation = generation


class AnalysisState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"


class IngredientAnalyzer:
    """One analyzer per user session; a new submission abandons the one in flight."""

    def __init__(
        self,
        resolver: Optional[SafetyResolver] = None,
        max_concurrency: Optional[int] = None,
    ):
        self._resolver = resolver or resolve_safety_data
        self._max_concurrency = max(1, max_concurrency or get_lookup_concurrency())
        self._generation = 0
        self._token: Optional[RunToken] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> AnalysisState:
        if self._task is not None and not self._task.done():
            return AnalysisState.ANALYZING
        return AnalysisState.IDLE

    @property
    def generation(self) -> int:
        return self._generation

    def cancel(self) -> None:
        """Abandon the run in flight, if any."""
        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done():
            logger.info("ANALYZE cancel run=%s", self._token.generation if self._token else "?")
            self._task.cancel()

    async def analyze(self, raw_text: str) -> AnalysisResult:
        if not isinstance(raw_text, str) or not raw_text.strip():
            raise InvalidIngredientInput(EMPTY_INPUT_MESSAGE)
        names = tokenize(raw_text)
        if not names:
            raise InvalidIngredientInput(EMPTY_INPUT_MESSAGE)

        self.cancel()
        self._generation += 1
        token = RunToken(self._generation)
        task = asyncio.ensure_future(self._run(names, token))
        self._token, self._task = token, task
        logger.info("ANALYZE start run=%s candidates=%d", token.generation, len(names))

        try:
            result = await task
        except asyncio.CancelledError:
            superseded = token.cancelled
            token.cancel()
            if superseded:
                logger.info("ANALYZE superseded run=%s", token.generation)
                raise AnalysisSuperseded(token.generation) from None
            raise
        finally:
            if self._task is task:
                self._task = None

        if token.cancelled or token.generation != self._generation:
            logger.info("ANALYZE discarded stale result run=%s", token.generation)
            raise AnalysisSuperseded(token.generation)
        return result

    async def _run(self, names: List[str], token: RunToken) -> AnalysisResult:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def lookup(name: str) -> Optional[AuthoritativeData]:
            async with semaphore:
                if token.cancelled:
                    return None
                try:
                    return await asyncio.to_thread(self._resolver, name, token)
                except Exception:
                    logger.warning(
                        "ANALYZE lookup failed run=%s name=%s", token.generation, name[:60], exc_info=True,
                    )
                    return None

        found = await asyncio.gather(*(lookup(n) for n in names))
        ingredients = [assemble(name, data) for name, data in zip(names, found)]
        result = aggregate(ingredients)
        logger.info(
            "ANALYZE done run=%s total=%d resolved=%d avg=%.2f verdict=%s",
            token.generation, result.total, sum(1 for d in found if d is not None),
            result.average_score, result.verdict.value,
        )
        return result


async def analyze(raw_text: str, resolver: Optional[SafetyResolver] = None) -> AnalysisResult:
    """Analyze one submission with a fresh analyzer (no cross-run cancellation)."""
    return await IngredientAnalyzer(resolver=resolver).analyze(raw_text)
