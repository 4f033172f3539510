"""Adapters connecting the core to logging and the network."""
