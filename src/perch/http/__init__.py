"""HTTP message types — immutable request, response, and headers."""
