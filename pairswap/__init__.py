"""
Core package for pairswap: direct constant-product pair swaps.

``pairswap.clients.v2swap`` holds the public API; settings and logging are
imported from their own modules to keep bootstrap order explicit.
"""
