"""Application layer: query processing."""

from .processor import LightningQueryProcessor, QueryResponse, build_processor

__all__ = ["LightningQueryProcessor", "QueryResponse", "build_processor"]
