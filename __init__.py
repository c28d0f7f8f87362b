"""
bridge-matchpoints
==================
Duplicate bridge scoring and matchpointing.

This package provides functionality to:
- Score a contract and result under duplicate rules
- Matchpoint all results of a board, with ties averaged
- Re-express a board from one pair's point of view
- Report one pair's session from a results CSV
"""

__version__ = "0.1.0"

# Note: With a flat module structure, imports should be done directly:
# Example:
#   from scoring import score
#   from matchpoints import rank_board
#   from common_objects import Contract, Direction
