"""Unified worker runner for all Temporal components.

Each deployed service runs the same image with a different CLI argument
to select which component's workflows/activities to expose on that worker.
"""
