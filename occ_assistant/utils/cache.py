"""In-process embedding cache with insertion-order eviction."""
import hashlib
from typing import Dict, List, Optional, Any
from occ_assistant.utils.config import settings
from occ_assistant.analytics.logger import logger


class EmbeddingCache:
    """Bounded map from text checksum to embedding vector.

    When full, the oldest-inserted key still present is evicted. Lookups do
    not refresh an entry's position and entries never expire by time.
    """

    def __init__(self, max_size: int = 100):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        # dicts keep insertion order; the first key is always the oldest
        self._entries: Dict[str, List[float]] = {}
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "evictions": 0
        }

    @staticmethod
    def make_key(text: str) -> str:
        """Checksum used as the cache key for a text."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    def get(self, text: str) -> Optional[List[float]]:
        """Get the cached embedding for a text."""
        embedding = self._entries.get(self.make_key(text))
        if embedding is None:
            self._stats["misses"] += 1
            return None
        self._stats["hits"] += 1
        return embedding

    def set(self, text: str, embedding: List[float]) -> bool:
        """Store an embedding; empty vectors are ignored."""
        if not embedding:
            return False

        key = self.make_key(text)
        if key not in self._entries and len(self._entries) >= self.max_size:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            self._stats["evictions"] += 1
            logger.debug(f"[Cache] Evicted oldest embedding {oldest_key[:12]}")

        self._entries[key] = list(embedding)
        self._stats["sets"] += 1
        return True

    def __contains__(self, text: str) -> bool:
        return self.make_key(text) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self) -> List[str]:
        """Cache keys, oldest first."""
        return list(self._entries)

    def clear(self):
        self._entries.clear()
        for stat in self._stats:
            self._stats[stat] = 0

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics including hit rate."""
        lookups = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "size": len(self._entries),
            "max_size": self.max_size,
            "hit_rate": (self._stats["hits"] / lookups) if lookups else 0.0,
        }


# Global embedding cache
embedding_cache = EmbeddingCache(max_size=settings.embedding_cache_max_size)
