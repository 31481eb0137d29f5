"""Core frame production: models, ports and the response-to-frame pipeline."""
