"""Training-load and physiology math."""
