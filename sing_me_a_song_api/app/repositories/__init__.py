"""Data access layer.  Repositories are the only code that runs SQL."""
