"""Flutterwave transfer proxy service."""
