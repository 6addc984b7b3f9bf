"""GitInsight: AI-assisted business categorization of git commits."""

__version__ = "0.1.0"
