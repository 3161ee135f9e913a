"""Date and time-of-day helpers."""
