# netlify_deploy/utils/__init__.py
"""Utility functions for netlify-deploy"""

from .async_utils import run_async, sync_to_async, AsyncPool

__all__ = [
    "run_async",
    "sync_to_async",
    "AsyncPool",
]
