"""Utility modules for hyprdeposit."""

from hyprdeposit.utils.concurrency import ProgressCallback, gather_bounded, notify

__all__ = ["ProgressCallback", "gather_bounded", "notify"]
