"""Backend package for the Tidecaster session API.

This package provides the FastAPI server that hosts play sessions, each
ticked by the server's monotonic clock on every request.
"""

__version__ = "1.0.0"
