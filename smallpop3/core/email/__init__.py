from .parser import EmailStructureParser

__all__ = ['EmailStructureParser']
