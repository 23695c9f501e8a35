"""REST route modules."""
