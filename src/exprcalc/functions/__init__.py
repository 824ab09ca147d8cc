"""Builtin functions callable from expressions."""
