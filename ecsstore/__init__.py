"""Archetype column storage, borrow tracking, column batches and command buffers for ECS designs."""

__version__ = "0.1.0"
__all__ = ["__version__"]