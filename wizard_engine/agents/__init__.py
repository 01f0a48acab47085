"""Seats that can be plugged into `GameEngine`."""

from .base import WizardAgent
from .random_agent import RandomWizardAgent

__all__ = ["RandomWizardAgent", "WizardAgent"]
