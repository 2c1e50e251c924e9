"""
StudyPlanner: goals, study sessions and spaced-repetition review
scheduling with generated daily plans.
"""

__version__ = "1.0.0"
