"""Pay Plan - take-home pay and contribution room estimates."""

__version__ = "0.3.0"
