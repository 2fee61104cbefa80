"""Read-only access to highlights and books on a Kobo e-reader."""
