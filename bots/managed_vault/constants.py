#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Global constants for the Managed Vault wrapper.

This module centralizes the numeric limits and defaults shared by the
accounting engine, the adapters and the command line tools.
"""

# === Fixed-Point Limits ===
# Maximum uint256 value; every intermediate amount must fit in it
MAX_UINT256 = (1 << 256) - 1

# ERC-20 decimals are a uint8, but 10**77 is the largest power that fits uint256
MAX_TOKEN_DECIMALS = 77

# Default decimals when a token reports nothing usable
DEFAULT_TOKEN_DECIMALS = 18

# === Fee Constants ===
# fee_pct is expressed in whole percentage points
PERCENT_DENOMINATOR = 100

MIN_FEE_PCT = 0
MAX_FEE_PCT = 100

# Fee share of the vault gain when nothing is configured
DEFAULT_FEE_PCT = 10

# === Watermark Policies ===
# "trailing" follows the vault rate down as well as up
WATERMARK_TRAILING = "trailing"
# "high_water" only ever moves the watermark upwards
WATERMARK_HIGH_WATER = "high_water"

WATERMARK_POLICIES = (WATERMARK_TRAILING, WATERMARK_HIGH_WATER)

# === Display ===
NAME_PREFIX = "Managed Vault "
SYMBOL_PREFIX = "share"

# === Ethereum Constants ===
# Default timeout for transaction receipts (seconds)
DEFAULT_RECEIPT_TIMEOUT = 180

# Default timeout for RPC requests (seconds)
DEFAULT_RPC_TIMEOUT = 20

# === File & State Management ===
DEFAULT_STATE_FILE = "state/managed_vault.json"

# Version tag written into persisted state files
STATE_FORMAT_VERSION = 1
