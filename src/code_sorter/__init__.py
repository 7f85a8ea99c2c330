"""
Code Sorter
===========

Reorders the top-level and class-member declarations of JavaScript and
TypeScript files into a canonical order while keeping every comment and
formatting choice of the moved code.
"""

__version__ = "1.0.0"
__author__ = "AgroMarin Tools"
__description__ = "Declaration sorter for JavaScript and TypeScript sources"
