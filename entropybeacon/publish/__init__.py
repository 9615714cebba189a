"""Publishing the latest record to a key-value store."""
