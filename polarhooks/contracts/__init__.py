"""Contracts package.

This package defines the *public* webhook contracts: event type names, the envelope
wire shape and the typed payload of each supported event type.
"""
