"""Execution tracking, closed-loop context and mid-week adaptation."""
