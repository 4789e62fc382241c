"""Pydantic models exchanged through the API."""
