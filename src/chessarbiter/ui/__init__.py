"""Presentation adapters. The rules engine itself never imports this package."""
