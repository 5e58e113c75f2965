"""Progressive-overload suggestions, plateau checks and streaks for a workout log."""

__version__ = "0.1.0"
