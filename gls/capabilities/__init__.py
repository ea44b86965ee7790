"""Capability modules.

Each module here is loaded at run time by ``gls.deps.loader`` (from the
network or from this directory), never imported by the lifecycle directly.
"""
