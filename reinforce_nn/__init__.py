"""
REINFORCE Neural Network Agent - Source Package
===============================================

A hand-written feed-forward network and a policy-gradient trainer.

Modules:
    ai/    - Primitives, networks, agent, and training loop
    game/  - Environment interface and reference environments
    utils/ - Logging
"""

__version__ = "1.0.0"
