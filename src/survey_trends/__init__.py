"""survey_trends package.

Contains modules for reading anonymous team survey responses from MongoDB,
validating the raw rows, bucketing them into month-relative weeks, and
computing per-question weekly averages with week-over-week trend indicators
for the results dashboard.

Architecture:
- Sources (questions, responses) → validated models → weekly summaries
- Aggregation is a chain of pure functions (group → average → sort → trends)
- Pydantic models define the serializable output shape for charts
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
