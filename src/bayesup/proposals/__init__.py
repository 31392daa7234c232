"""
Proposal distributions for the block Metropolis-Hastings sampler.
"""

from .rand_walk import setup_normal_proposal, step_to_vector, adapt, ADAPT_EVERY, SCALE_MIN, SCALE_MAX

__all__ = [
    'setup_normal_proposal',
    'step_to_vector',
    'adapt',
    'ADAPT_EVERY',
    'SCALE_MIN',
    'SCALE_MAX',
]
