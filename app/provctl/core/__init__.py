"""Core provisioning logic for provctl."""
