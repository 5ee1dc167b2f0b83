"""Messaging transport adapters."""

from .base import MessageTransport
from .console import ConsoleTransport
from .image_downloader import ImageDownloader

__all__ = ["MessageTransport", "ConsoleTransport", "ImageDownloader"]
