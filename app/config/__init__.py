"""Configuration: settings, database factories, triangle shape."""
