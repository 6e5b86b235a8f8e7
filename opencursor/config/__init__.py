"""Configuration loading, editing and settings."""
