"""
Bracket Prediction Core

This package contains the pure logic of the bracket prediction competition:
- Records and snapshots (bracketcore.records)
- Pick progression and scoring (bracketcore.bracket)
- Leaderboards, round accuracy and vote exports (bracketcore.analytics)
- Shared configuration and utilities
"""

__version__ = "1.0.0"

from bracketcore.config import *
