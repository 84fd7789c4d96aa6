"""Steering command line interface."""
