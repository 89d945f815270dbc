from .allocators import CounterAllocator, IdAllocator, RowCountAllocator

__all__ = ["CounterAllocator", "IdAllocator", "RowCountAllocator"]
