"""Settings, logging and startup validation."""
