"""Pool-wide constants.

Centralizes the fee denominator and well-known addresses.
"""

# Fees are expressed in basis points out of this denominator (10000 = 100%)
BPS_DENOMINATOR = 10_000

# Largest fee accepted for a pair or the platform
MAX_FEE_BPS = BPS_DENOMINATOR

# The null principal; never a valid token, creator or wallet
NULL_ADDRESS = "0x0000000000000000000000000000000000000000"
