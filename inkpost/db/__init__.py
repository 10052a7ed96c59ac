"""Database Package — declarative base for ORM models."""
