"""Undercover: a pass-and-play social deduction word game engine."""

__version__ = "0.1.0"
