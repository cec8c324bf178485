"""
Generators — render files for the container build context.

Each generator returns a ``GeneratedFile``; writing it to disk is a
separate step so rendering stays pure.
"""
