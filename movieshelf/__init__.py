"""
Shared movieshelf library code.

This package holds the TMDb catalog gateway and the watchlist store.
UI layers should import from `movieshelf` rather than the other way around.
"""
