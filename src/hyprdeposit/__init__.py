"""hyprdeposit: combine balances scattered across chains into one deposit."""

__version__ = "0.1.0"
