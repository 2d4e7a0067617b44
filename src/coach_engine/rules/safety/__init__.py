"""SAFETY tier: hard limits that always have the final say."""
