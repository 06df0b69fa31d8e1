"""Core draft engine: tiers, pick values, recommendations, keepers and grading"""
from .models import (
    UNRANKED_ADP, Candidate, DraftPick, RosterNeed, AutoDraftConfig,
    Position, DraftStrategy, RecommendationType, RiskTolerance, TimeoutAction
)
from .tiers import TierBuilder, TierInfo, tier_info_for
from .pick_values import PickValueTable
from .snapshot import SnapshotCache, TierSnapshot
from .snake import SnakeDraftMath, SnakeDraftAnalysis
from .advisor import (
    TeamContext, AdvisorResult, TieBreakAdvisor, RosterNeedAdvisor, HttpTieBreakAdvisor
)
from .recommendations import Recommendation, RecommendationEngine
from .keepers import KeeperCandidate, KeeperCostModel, KeeperLeagueConfig, KeeperSelection, KeeperSelector
from .analytics import DraftAnalytics, DraftAnalyticsCalculator
from .session import DraftSession

__all__ = [
    'UNRANKED_ADP', 'Candidate', 'DraftPick', 'RosterNeed', 'AutoDraftConfig',
    'Position', 'DraftStrategy', 'RecommendationType', 'RiskTolerance', 'TimeoutAction',
    'TierBuilder', 'TierInfo', 'tier_info_for', 'PickValueTable',
    'SnapshotCache', 'TierSnapshot', 'SnakeDraftMath', 'SnakeDraftAnalysis',
    'TeamContext', 'AdvisorResult', 'TieBreakAdvisor', 'RosterNeedAdvisor', 'HttpTieBreakAdvisor',
    'Recommendation', 'RecommendationEngine',
    'KeeperCandidate', 'KeeperCostModel', 'KeeperLeagueConfig', 'KeeperSelection', 'KeeperSelector',
    'DraftAnalytics', 'DraftAnalyticsCalculator', 'DraftSession'
]
