"""
Calldata gas heuristic for RFQ trades.

Costs are per calldata item at 16 gas per non-zero byte. The total is an
estimate of the extra calldata an RFQ trade carries, not an on-chain gas
prediction.
"""

DEX_OVERHEAD = 2640
ADDRESS = 320
AMOUNT = 200
FULL_WORD = 512
OFFSET_SMALL = 40


def compute_gas_estimate_overhead() -> int:
    return (
        DEX_OVERHEAD
        # addresses: pool, quoteToken, externalAccount
        + ADDRESS * 3
        # uint256: baseTokenAmount, quoteTokenAmount, quoteExpiry, nonce
        + AMOUNT * 4
        # bytes32 txid
        + FULL_WORD
        # bytes signature, 65 bytes
        + FULL_WORD * 2
        + OFFSET_SMALL
    )
