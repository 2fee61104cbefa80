"""Note vault storage, frontmatter metadata and note paths."""
