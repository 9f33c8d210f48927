"""Test suite for the specsuite package.

This package contains unit and integration tests validating the
declaration DSL, forest selection, execution semantics, result
aggregation and the command-line runner.
"""
