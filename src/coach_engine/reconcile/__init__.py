"""Plan to calendar reconciliation."""
