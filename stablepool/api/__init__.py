"""HTTP API for the stable pair."""
