"""Imagedrop: short-lived image hosting over HTTP."""
