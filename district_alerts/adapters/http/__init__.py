from .client import HttpFetcher

__all__ = ["HttpFetcher"]
