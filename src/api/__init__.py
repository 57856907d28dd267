"""HTTP API exposing the conversation store."""
