"""Local post storage: names, document format, post entity."""
