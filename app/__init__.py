"""Howler relay: authenticated query relay and push notification fan-out."""
