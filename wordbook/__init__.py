"""Personal vocabulary word books."""
