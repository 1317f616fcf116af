"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .schedule_planner import DailyPlan, SchedulePlannerService

__all__ = ["DailyPlan", "SchedulePlannerService"]
