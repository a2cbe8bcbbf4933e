"""Read and edit APT configuration, sources lists, history logs and .deb archives."""

__version__ = "0.1.0"