"""Broadcast logging and output."""

from chaosball.logging.broadcast_log import BroadcastLog, LogEntry, ScoringPlay

__all__ = ["BroadcastLog", "LogEntry", "ScoringPlay"]
