"""
Municipal infrastructure registry service.

Three registries (assets, maintenance tasks, sensors and readings) sharing a
ledger that supplies the current height and serializes writes.
"""
