"""Logging helpers for ec2dev."""

from ec2dev.logging.formatters import StreamFormatter, StreamRoutingFilter

__all__ = ["StreamFormatter", "StreamRoutingFilter"]
