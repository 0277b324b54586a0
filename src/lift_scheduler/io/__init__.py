"""Plan persistence."""
