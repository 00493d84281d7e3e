"""CivicLens - civic issue analysis and assistant backend."""
