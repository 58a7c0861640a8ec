"""WebRTC call-setup signaling relay for two-party rooms."""

__version__ = "0.1.0"
