"""Pure functions: identifier normalization, partitioning, progress, response parsing."""
