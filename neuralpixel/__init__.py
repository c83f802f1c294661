"""Stable-diffusion command building, settings cache and PNG parameter reading."""

__version__ = "0.1.0"