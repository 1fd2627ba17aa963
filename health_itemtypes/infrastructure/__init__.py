"""Infrastructure layer: XML reading/writing, settings and logging."""
