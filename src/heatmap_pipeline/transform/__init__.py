"""Scaling, clustering and ordering transforms."""
