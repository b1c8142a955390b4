"""Utility modules for the eye-state framework."""

from .config import Config

__all__ = ['Config']
