"""
fillreactor: settlement engine for off-chain signed exchange orders
"""

__version__ = "0.1.0"
