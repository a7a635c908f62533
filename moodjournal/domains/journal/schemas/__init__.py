"""Journal request/response schemas."""
