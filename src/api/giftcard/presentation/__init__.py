"""HTTP presentation layer for gift card redemption."""
