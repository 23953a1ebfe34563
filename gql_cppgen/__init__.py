"""Generate C++ GraphQL client headers from schemas."""
