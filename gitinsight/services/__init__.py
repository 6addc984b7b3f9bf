"""Categorization services: validation, storage, source lookup and orchestration."""
