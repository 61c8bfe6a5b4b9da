"""Object kind normalization."""

from .normalizer import KindNormalizer

__all__ = ['KindNormalizer']
