"""Engine configuration (environment-driven settings)."""
