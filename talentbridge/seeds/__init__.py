"""Database seed scripts."""
