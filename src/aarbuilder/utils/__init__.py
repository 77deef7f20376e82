"""Small pure helpers shared across the package."""
