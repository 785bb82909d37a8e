"""Configuration, database access, logging and error types."""
