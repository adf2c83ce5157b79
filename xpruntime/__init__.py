"""Building blocks for resource controllers: field paths, conditions, resource types, metadata, events, flags, logging and errors."""

__version__ = "0.1.0"

__all__ = [
    "condition",
    "errors",
    "event",
    "feature",
    "fieldpath",
    "logger",
    "mergeopts",
    "meta",
    "paved",
    "resource",
]