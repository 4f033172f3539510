"""Core domain: measures, encoding, ports and the reporter."""
