"""Core primitives shared by the API client and the provider."""
