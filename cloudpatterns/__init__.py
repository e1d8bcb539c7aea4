"""Stability and scalability patterns for cloud services, a transactional
key-value store with its HTTP server, and small command-line demonstrations."""

__version__ = "0.1.0"