"""birdnest - unified front-end for apt, Flatpak and pikman."""

__version__ = "0.1.0"
