"""Exact rationals, constructive reals and their product."""
