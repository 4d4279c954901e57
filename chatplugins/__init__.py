"""Chat-bot feature logic: reminders, games, divination, sign-in scoring, word statistics and web lookups."""

__version__ = "0.1.0"