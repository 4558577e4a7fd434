"""Shared infrastructure for the Conduit control plane.

Provides the Temporal client connection factory, task queue constants, the
error taxonomy, feature flags, and Pydantic models used across all components.
"""
