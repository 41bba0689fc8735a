"""Telemetry and observability helpers.

This package logs how search orders are built and probed for auditing.
"""

from .logger import ProbeLogger

__all__ = ["ProbeLogger"]
