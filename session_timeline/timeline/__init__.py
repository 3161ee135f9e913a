"""Day-view grid layout."""
