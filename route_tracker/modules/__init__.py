"""Route Tracker modules."""
