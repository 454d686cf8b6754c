"""
models/ - Domain Layer
======================
Plain dataclasses and enums. No I/O and no dependencies on other layers
except `config` for account defaults.
"""
