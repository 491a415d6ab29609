"""Git domain types, revision syntax, search parsing and caches."""
