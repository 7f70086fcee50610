"""Local services used after the instance changes state."""
