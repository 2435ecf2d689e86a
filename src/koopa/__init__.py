"""koopa: copy/paste with superpowers."""

__version__ = "0.3.0"
