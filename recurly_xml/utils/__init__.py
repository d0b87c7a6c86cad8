"""Utility helpers shared by the clients."""
