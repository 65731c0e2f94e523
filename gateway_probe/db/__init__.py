"""PostgreSQL connection provider used by the process entry point."""
