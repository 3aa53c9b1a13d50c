"""Core utilities for SealBox: entropy, exceptions and memory helpers."""
