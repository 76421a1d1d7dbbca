"""Fire alarm telemetry receiver with a bounded in-memory event log."""
