"""Incremental import of Kobo highlights into inbox notes."""
