"""Tiered Cache Implementation.

Provides the concrete implementation of the TieredCache interface:
an in-memory LRU tier (RecencyTracker) backed by per-entry pickle files
(SpilloverStore), joined by FileBackedCache.
Bounded Context: Cache Management
"""
