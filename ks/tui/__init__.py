"""Full-screen interactive screens and the runner that drives them."""

from ks.tui.runner import run_screen

__all__ = ["run_screen"]
