"""charmretry: transient-failure retry and escalation for charm event handlers."""

__version__ = "0.1.0"
