"""Application services built on the record store."""
