"""Weekly plan generation and workout design."""
