"""Command plumbing for the ``kp`` CLI.

``kp`` is a single command; this package holds its Click base class and
the shared application context.
"""
