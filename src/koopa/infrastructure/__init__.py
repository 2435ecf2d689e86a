"""Infrastructure layer: filesystem walking, ignore rules, and copying.

This layer depends on stdlib, third-party libs (pathspec), and the domain
layer.  It must never import from services, commands, or output.
"""
