"""Skinny Studio — chat-driven orchestration of AI image and video generation."""

__version__ = "0.4.0"
