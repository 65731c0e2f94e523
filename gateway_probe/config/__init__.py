"""Environment-driven configuration for the gateway client and collaborators."""
