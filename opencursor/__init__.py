"""Installer for the cursor-acp OpenCode plugin."""

__version__ = "0.1.0"
