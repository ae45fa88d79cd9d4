"""
Client package for pairswap.

Contains the on-chain exchange clients.
"""
