"""Apparel catalog service."""
