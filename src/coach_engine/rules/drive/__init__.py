"""DRIVE tier: rules that push the week toward the current training goal."""
