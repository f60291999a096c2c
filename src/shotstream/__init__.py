"""shotstream package bootstrap.

Reconstructs per-shot results from an ordered stream of execution events and
notifies observers through a coalesced refresh signal.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
