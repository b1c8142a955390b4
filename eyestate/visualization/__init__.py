"""Visualization modules for the eye-state framework."""

from .plotter import Plotter

__all__ = ['Plotter']
