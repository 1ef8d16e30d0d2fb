"""Core rules engine package for Cozen."""

__all__ = [
    "cards",
    "deck",
    "board",
    "player",
    "state",
    "evaluation",
    "moves",
    "scoring",
    "game",
    "rules_schema",
    "commands",
    "service",
]
