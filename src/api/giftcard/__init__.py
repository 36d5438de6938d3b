"""Gift card redemption bounded context.

Verifies printed gift card codes against the Admin API by their last four
characters and converts a verified balance into a single-use discount code.
"""
