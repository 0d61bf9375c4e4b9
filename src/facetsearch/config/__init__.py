"""Configuration – environment-driven settings."""
