"""ChaosBall - a generated sports broadcast with live wagering."""

__version__ = "0.1.0"
