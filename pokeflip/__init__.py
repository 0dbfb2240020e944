"""
Poke Flip

Memory-matching card game server: flip two cards, keep the pairs, and get a
fresh shuffled deal once the board is cleared.
"""

__version__ = "1.0.0"
