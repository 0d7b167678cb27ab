"""
rfqLiquidity: market maker price levels exposed to a swap aggregator as
per-maker pools, with firm quote validation before a trade is built.
"""
