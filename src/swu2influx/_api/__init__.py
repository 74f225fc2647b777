"""Portal endpoint modules."""
