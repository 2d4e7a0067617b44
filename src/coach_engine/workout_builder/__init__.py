"""Workout builder — decomposes workout briefs into structured workouts."""

from coach_engine.workout_builder.builder import WorkoutBuilder

__all__ = ["WorkoutBuilder"]
