"""Routing — route-target resolution and controller lookup.

Symbolic controller paths and action names are turned into a fully-qualified
controller identifier and a method name, then looked up by a resolver.
"""
