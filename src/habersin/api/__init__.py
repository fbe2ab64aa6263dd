"""HTTP API for Habersin."""
