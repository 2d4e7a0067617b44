"""Recent workout-type and zone history, plus the derived-data cache."""
