"""Phase classification and training load advice."""
