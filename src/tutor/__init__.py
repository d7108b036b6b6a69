"""
Tutor service layer shared by renderers.
"""

from src.tutor.service import DrillSession, RangeBuildResult, TutorService, UnitStatus

__all__ = ["DrillSession", "RangeBuildResult", "TutorService", "UnitStatus"]
