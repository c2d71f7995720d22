"""Package backends answering search and detail queries."""

from birdnest.backends.apt import AptBackend
from birdnest.backends.base import Backend
from birdnest.backends.flatpak import FlatpakBackend
from birdnest.backends.pikman import PikmanBackend

__all__ = [
    "AptBackend",
    "Backend",
    "FlatpakBackend",
    "PikmanBackend",
]
