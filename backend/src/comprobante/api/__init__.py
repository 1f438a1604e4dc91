"""API package - HTTP surface over documents and gateways."""
