"""Binding — handler signature introspection and request-bag binding.

Parameters are described once per dispatch and bound in declaration order,
so the first failing parameter is the one reported.
"""
