"""Terminal front end: Typer commands over rich or headless output."""
