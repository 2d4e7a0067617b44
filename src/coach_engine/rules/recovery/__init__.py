"""RECOVERY tier: readiness-driven downgrades."""
