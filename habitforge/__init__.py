"""habitforge - daily wellness checklist with XP, levels and streaks."""

__version__ = "0.1.0"
