"""Bundled locale resource tables (``<locale>.json``)."""
