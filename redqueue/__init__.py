"""
Redis-backed Job Queue Client

A multi-queue job distribution layer built entirely on Redis primitives:
FIFO queues, a worker registry with TTL-bounded liveness records, and
processed/failed statistics shared by any number of independent processes.
"""

__version__ = "1.0.0"
