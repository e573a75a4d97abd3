"""Reelmark: video catalog browsing with per-user bookmarks."""
