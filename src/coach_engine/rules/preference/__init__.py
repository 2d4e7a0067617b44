"""PREFERENCE tier: recovery weeks and workout variety."""
