"""Data loading"""
from .loader import load_candidates, load_roster, load_keepers, load_draft_picks

__all__ = ['load_candidates', 'load_roster', 'load_keepers', 'load_draft_picks']
