"""Configuration loading (.env, YAML and environment variables)."""
