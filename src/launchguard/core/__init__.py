"""
Core domain models, errors, configuration and contracts.

This module contains the foundational building blocks shared by the
ownership registry, the anti-bot guard and the permit verifier.
"""
