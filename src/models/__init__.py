"""Pydantic DTOs."""
