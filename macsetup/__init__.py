"""macsetup — idempotent macOS development workstation provisioning."""

__version__ = "0.1.0"
