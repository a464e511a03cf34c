"""Evaluator helper modules for the Skiff runtime."""

__all__ = [
    "bind",
    "blocks",
    "chains",
    "common",
    "control",
    "expr",
    "fn",
    "loops",
    "mutation",
    "objects",
]
