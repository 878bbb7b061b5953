"""HTTP API for the memoized generation service."""
