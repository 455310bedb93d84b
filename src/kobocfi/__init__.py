"""Locate Kobo bookmark text inside EPUBs and emit EPUB CFI ranges."""
