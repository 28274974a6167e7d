"""A fixed-size in-memory cache with TinyLFU admission and sampled LFU eviction, with its bloom filter, sketch, buffer pool and workload helpers."""

__version__ = "0.1.0"

__all__ = ["bloom", "buffer", "cache", "hashing", "metrics", "policy", "ring", "sim", "sketch", "store"]