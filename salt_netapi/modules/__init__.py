"""Typed bindings for Salt execution and runner modules, one module per file."""
