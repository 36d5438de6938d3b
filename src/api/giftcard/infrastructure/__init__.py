"""Infrastructure adapters for gift card redemption."""
