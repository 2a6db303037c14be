"""Shared helpers for the iTunes client."""

from .deadline import Deadline
from .log_json import JsonLogger

__all__ = ["Deadline", "JsonLogger"]
