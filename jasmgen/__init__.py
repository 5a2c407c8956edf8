"""Semantic analysis and Jasmin-style JVM assembly generation for a small typed language."""

__version__ = "0.1.0"
__all__ = ["analyzer", "checker", "codegen", "emitter", "nodes", "symbols", "typesys"]