from __future__ import annotations

from typing import Sequence

from domain.models import CheckboxOption, OptionSelection, SelectionConfidence, UserContext
from domain.ports import LLMClientPort, LoggerPort
from domain.prompts import build_checkbox_prompt
from domain.services.data_retriever import DataRetriever
from domain.services.rate_limiter import RateLimiter
from domain.services.reasoning_parser import parse_option_analysis


class CheckboxAnalyzer:
    """
    Picks one option of a checkbox/radio group for the current user.

    A selection is always returned: an unanswered radio group blocks form
    submission, so every failure path ends in the deterministic fallback.
    """

    def __init__(
        self,
        *,
        data_retriever: DataRetriever,
        rate_limiter: RateLimiter,
        logger: LoggerPort,
        llm: LLMClientPort | None = None,
    ) -> None:
        self._data = data_retriever
        self._rate_limiter = rate_limiter
        self._logger = logger
        self._llm = llm

    async def select_best_option(
        self,
        options: Sequence[CheckboxOption],
        question: str,
    ) -> OptionSelection:
        if not options:
            self._logger.warning("no_options_to_select", question=question)
            return self.fallback_selection(options, None)

        context: UserContext | None = None
        try:
            context = await self._data.get_context()
            if self._llm is None:
                return self.fallback_selection(options, context)

            await self._rate_limiter.acquire()
            text = await self._llm.complete(
                build_checkbox_prompt(question=question, options=options, context=context),
                max_tokens=200,
                temperature=0.3,
            )
            return parse_option_analysis(text, len(options))
        except Exception as exc:
            self._logger.error("checkbox_analysis_failed", question=question, error=str(exc))
            selection = self.fallback_selection(options, context)
            return OptionSelection(
                selected_index=selection.selected_index,
                reasoning=selection.reasoning,
                confidence=selection.confidence,
                error=str(exc),
            )

    @staticmethod
    def fallback_selection(
        options: Sequence[CheckboxOption],
        context: UserContext | None,
    ) -> OptionSelection:
        """Pick the option naming the user's location, else the first one.

        An empty option list yields ``selected_index=-1`` with ``error`` set.
        """
        if not options:
            return OptionSelection(
                selected_index=-1,
                reasoning="No options to choose from",
                confidence=SelectionConfidence.LOW,
                error="no options",
            )

        location = (context.profile.location or "").strip().lower() if context else ""
        if location:
            for index, option in enumerate(options):
                if location in option.label.lower():
                    return OptionSelection(
                        selected_index=index,
                        reasoning="Matched user location (fallback)",
                        confidence=SelectionConfidence.MEDIUM,
                    )

        return OptionSelection(
            selected_index=0,
            reasoning="Selected first option (fallback)",
            confidence=SelectionConfidence.LOW,
        )
