"""Promotion of annotated highlights into standalone insight notes."""
