"""Survey Insights: statistics engine for survey and personality-assessment responses."""

__version__ = "1.0.0"
