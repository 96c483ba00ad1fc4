"""Pydantic schemas for API request/response models."""

from .ingest import *
