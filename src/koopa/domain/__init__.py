"""Domain layer — keys, shells, errors, and the translate engine.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
