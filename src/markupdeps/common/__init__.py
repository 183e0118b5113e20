"""Shared helpers used across the resolver, markup and registry modules."""
