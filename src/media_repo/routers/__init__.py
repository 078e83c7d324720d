"""HTTP routers for the media repository."""
