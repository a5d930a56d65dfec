"""lnquery: natural-language queries over a Lightning node's channels.

Classifies free-text questions about payment channels, fetches channel data
through a node-agnostic gateway and answers with a readable summary plus
structured health and liquidity data.
"""

__version__ = "0.1.0"
