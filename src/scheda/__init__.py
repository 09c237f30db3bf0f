"""scheda: periodized resistance-training session tracker."""

__version__ = "0.1.0"
