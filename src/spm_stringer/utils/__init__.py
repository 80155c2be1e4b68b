"""Utility helpers for runners and post-processing."""

from .run_info import print_run_header, print_stringer_state, print_stringer_summary

__all__ = [
    "print_run_header",
    "print_stringer_summary",
    "print_stringer_state",
]
