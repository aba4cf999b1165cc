"""ghcopy command-line application."""
