"""
Command handlers for multigit.

- run: fan an arbitrary git command out over local checkouts
- clone: single clone pass-through, or discover-then-clone fan-out
"""
