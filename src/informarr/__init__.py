"""Informarr: tells requesters when the media they asked for is ready."""
