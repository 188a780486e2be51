from .build_app import build_grade_engine_app

__all__ = [
    "build_grade_engine_app",
]
"""Factory helpers for building the grade engine application."""
