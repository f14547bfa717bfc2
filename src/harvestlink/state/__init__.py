"""State layer.

Owns the live update ledger and the reconciler that derives per-order
trip sheets from the REST snapshot plus live stream rows.
"""
