"""Innothon admin reporting API (FastAPI backend-for-frontend)."""
