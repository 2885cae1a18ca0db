"""Command line interface for icomoon-ingest."""
