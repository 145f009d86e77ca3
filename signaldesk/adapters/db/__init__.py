"""Database adapters (engine, sessions, health checks)."""
