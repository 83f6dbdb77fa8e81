"""CLI command modules registered by ``macsetup.main``."""
