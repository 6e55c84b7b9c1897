"""Care-professional search over Google Places with caching and rate limiting."""
