"""Table presenters for CLI output."""
