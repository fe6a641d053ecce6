"""Rendering: the color integrator, the worker-pool renderer, progress
reporting and image output.

Import from the submodules directly; ``raytracer`` depends on
``pathtracer.config``, which itself imports ``integrator``.
"""
