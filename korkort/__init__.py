"""Korkort: lesson progress sync for the driving-theory app."""

__version__ = "1.0.0"
