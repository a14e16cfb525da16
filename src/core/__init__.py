"""
Core domain models, numeric primitives, and contracts.

This module contains the foundational building blocks of the calculator
that are independent of any presentation layer (UI, keyboard, CLI).
"""
