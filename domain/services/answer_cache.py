from __future__ import annotations

import hashlib

from domain.models import CacheEntry, CacheEntryPreview, CacheStats, CachedAnswer
from domain.ports import ClockPort

DEFAULT_TTL_MS = 300_000


class AnswerCache:
    """
    Session-scoped memo of question -> answer.

    Questions are keyed by the md5 of their lowercased, trimmed text. Expiry
    is checked lazily on ``get``; stale entries stay in memory until read or
    until ``clean_expired`` is called.
    """

    def __init__(self, *, clock: ClockPort, default_ttl_ms: int = DEFAULT_TTL_MS) -> None:
        self._clock = clock
        self._default_ttl_ms = default_ttl_ms
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, question: str) -> CachedAnswer | None:
        key = self.key_for(question)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry):
            del self._entries[key]
            return None
        return CachedAnswer(answer=entry.answer, confidence=entry.confidence)

    def set(
        self,
        question: str,
        answer: str,
        confidence: int = 100,
        ttl_ms: int | None = None,
    ) -> None:
        key = self.key_for(question)
        self._entries[key] = CacheEntry(
            key=key,
            answer=answer,
            confidence=confidence,
            stored_at=self._clock.now(),
            ttl_ms=self._default_ttl_ms if ttl_ms is None else ttl_ms,
        )

    def clear(self) -> None:
        self._entries.clear()

    def clean_expired(self) -> int:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def get_stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            entries=tuple(
                CacheEntryPreview(
                    answer=entry.answer[:50] + "...",
                    age_ms=self._age_ms(entry),
                    confidence=entry.confidence,
                )
                for entry in self._entries.values()
            ),
        )

    @staticmethod
    def key_for(question: str) -> str:
        return hashlib.md5(question.lower().strip().encode("utf-8")).hexdigest()

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._age_ms(entry) > entry.ttl_ms

    def _age_ms(self, entry: CacheEntry) -> int:
        return int((self._clock.now() - entry.stored_at).total_seconds() * 1000)
