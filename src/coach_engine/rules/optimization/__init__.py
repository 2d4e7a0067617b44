"""OPTIMIZATION tier: sport mix, day placement and volume."""
