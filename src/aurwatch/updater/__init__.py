"""Package update orchestration."""
