"""Calendar-level concerns: availability overlay and view navigation."""
