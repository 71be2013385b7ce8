"""API routers for the Tidecaster server."""
