"""Local and remote package metadata."""
