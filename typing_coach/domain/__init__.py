"""Domain layer for the typing coach application."""
