"""Concurrently UI - run shell commands side by side and browse their live logs."""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
