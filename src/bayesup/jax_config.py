"""
JAX Configuration - MUST be imported before any other bayesup module.

This module sets environment variables and global JAX flags:
- Suppress CUDA/XLA C++ log noise
- Enable double precision (parameter tables and histogram edges are float64)
"""
import os

# Must be set before JAX import
os.environ.setdefault('TF_CPP_MIN_LOG_LEVEL', '2')

import jax  # noqa: E402

jax.config.update("jax_enable_x64", True)
