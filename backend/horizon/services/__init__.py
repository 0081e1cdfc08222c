"""Application services.

Each subpackage (``auth``, ``users``, ``follows``, ``posts``,
``notifications``) owns one area of use cases and its DTOs. Shared
primitives live in :mod:`horizon.services._shared`.
"""
