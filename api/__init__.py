"""Browser variant: FastAPI backend and static page."""
