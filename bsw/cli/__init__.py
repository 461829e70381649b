"""Interactive terminal front-end."""
