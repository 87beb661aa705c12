"""Badminton doubles league domain modules."""
