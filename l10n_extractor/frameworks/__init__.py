"""Framework adapters."""

from .base import BaseAdapter
from .flutter import FlutterAdapter

ADAPTERS = {
    'flutter': FlutterAdapter,
}

__all__ = ['BaseAdapter', 'FlutterAdapter', 'ADAPTERS']
