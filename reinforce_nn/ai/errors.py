"""
Error Types
===========

ShapeError           - A vector or matrix does not match the expected dimensions
EmptyEpisodeError    - An update was requested for an episode with no steps
NumericGuardTriggered - Warning category issued when an epsilon guard activates

Shape and empty-episode errors signal a configuration bug (network and
environment disagree on sizes) and are never retried.
"""


class ShapeError(ValueError):
    """Input dimensions do not match a weight matrix or another operand."""


class EmptyEpisodeError(ValueError):
    """Discounting or updating a zero-length episode."""


class NumericGuardTriggered(RuntimeWarning):
    """
    Informational warning: a numeric guard changed the computation.

    Issued by:
        - softmax, when the max-shift prevents an overflow
        - cross_entropy, when a weighted probability is clamped to epsilon
        - discount_rewards, when the returns have (effectively) zero spread
    """
