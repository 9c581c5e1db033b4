"""Infrastructure layer - HTTP clients for the upstream sources."""
