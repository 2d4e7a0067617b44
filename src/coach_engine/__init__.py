"""Adaptive training-periodization engine."""
