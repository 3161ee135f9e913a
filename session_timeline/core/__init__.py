"""Clock, events, errors and logging shared across the engine."""
