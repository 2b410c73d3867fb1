"""Sparrow notifications service package."""
