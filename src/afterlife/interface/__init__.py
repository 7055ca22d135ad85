"""Programmatic front ends for the engine."""
