"""Computational backends for the Monte Carlo and bootstrap drivers."""
