"""Service layer for the booking engine."""
