"""Constant-product pricing math."""

from cpamm.amm.pricing import fee_multiplier, quote_input, quote_output

__all__ = ["fee_multiplier", "quote_input", "quote_output"]
