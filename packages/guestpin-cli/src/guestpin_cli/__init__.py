"""guestpin-cli: Command line interface for guestpin."""

from __future__ import annotations

__version__ = "0.1.0"
