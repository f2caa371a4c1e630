"""
Benchmarks for the MODWT engine.
"""
