"""Top‑level package for the farm shop.

The business logic is exposed via :mod:`farm`, the stock keeping via
:mod:`inventory`, transactions and the sales log via :mod:`transaction`
and :mod:`sales`, and the interactive menu in :mod:`cli`.
"""
