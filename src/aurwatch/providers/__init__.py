"""Default adapters for the external services the update pipeline talks to."""
