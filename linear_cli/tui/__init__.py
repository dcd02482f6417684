"""Interactive terminal UI components."""
