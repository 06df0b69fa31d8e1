"""Per-session cache of the tier snapshot"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from draft_engine.core.models import Candidate, Position
from draft_engine.core.tiers import Tier, TierBuilder


logger = logging.getLogger(__name__)

PoolKey = FrozenSet[Tuple[str, float]]


def pool_key(candidates: Iterable[Candidate]) -> PoolKey:
    """Identity of a candidate pool: who is in it and at what ADP"""
    return frozenset((c.candidate_id, c.adp) for c in candidates)


@dataclass(frozen=True)
class TierSnapshot:
    """Tiers computed from one version of the candidate pool"""
    key: PoolKey
    tiers: Dict[Position, List[Tier]]


class SnapshotStats:
    """Track snapshot reuse"""
    def __init__(self):
        self.hits = 0
        self.misses = 0
        self.invalidations = 0
        self._lock = threading.Lock()

    def record_hit(self):
        with self._lock:
            self.hits += 1

    def record_miss(self):
        with self._lock:
            self.misses += 1

    def record_invalidation(self):
        with self._lock:
            self.invalidations += 1

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self.hits + self.misses
            return {
                'hits': self.hits,
                'misses': self.misses,
                'invalidations': self.invalidations,
                'hit_rate': self.hits / total if total > 0 else 0.0
            }


class SnapshotCache:
    """Holds the tier snapshot for a single draft

    One instance per draft session. The snapshot is rebuilt whenever the pool
    it is asked about differs from the one it was built from, and dropped
    outright by invalidate() when a pick is made.
    """

    def __init__(self, tier_builder: Optional[TierBuilder] = None):
        self.tier_builder = tier_builder or TierBuilder()
        self.stats = SnapshotStats()
        self._snapshot: Optional[TierSnapshot] = None
        self._lock = threading.Lock()

    def get(self, candidates: List[Candidate]) -> TierSnapshot:
        """Snapshot for this pool, rebuilding it if the pool changed"""
        key = pool_key(candidates)

        with self._lock:
            snapshot = self._snapshot
            if snapshot is not None and snapshot.key == key:
                self.stats.record_hit()
                return snapshot

            self.stats.record_miss()
            snapshot = TierSnapshot(key=key, tiers=self.tier_builder.build_all(candidates))
            self._snapshot = snapshot
            logger.debug(f"Rebuilt tier snapshot for {len(candidates)} candidates")
            return snapshot

    def invalidate(self) -> None:
        """Forget the current snapshot"""
        with self._lock:
            if self._snapshot is not None:
                self.stats.record_invalidation()
            self._snapshot = None

    @property
    def current(self) -> Optional[TierSnapshot]:
        return self._snapshot
