"""Cron / APScheduler entry points for the coach jobs."""
