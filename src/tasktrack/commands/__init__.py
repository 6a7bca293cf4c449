"""Operator commands for the tasktrack CLI."""
