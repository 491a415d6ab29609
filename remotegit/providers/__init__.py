"""Git data providers for remote-backed repositories."""
