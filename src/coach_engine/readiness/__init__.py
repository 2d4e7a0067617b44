"""Readiness model: wellness, training gap and RPE/Feel feedback."""
