"""Numerical kernels, thread patterns, a sparse CG solver and an IDEA-style cipher tool."""

__version__ = "0.1.0"