"""Routing — path pattern compilation and ordered, permission-gated dispatch.

Routes are registered during setup and frozen into an immutable
sequence when the app starts serving.
"""
