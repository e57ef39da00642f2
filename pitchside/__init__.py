"""Pitchside companion-site backend."""
