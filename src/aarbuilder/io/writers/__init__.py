"""Renderers turning blocks or laid-out text into artifact bytes."""
