"""HTTP layer for VisaTrack (FastAPI)."""
