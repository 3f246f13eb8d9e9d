"""Operator framework: data model, resource collection, environment and trait catalog.

Common entrypoints:

- `integration_operator.framework.models`: Integration, IntegrationKit and IntegrationPlatform
- `integration_operator.framework.environment`: per-pass state threaded through traits
- `integration_operator.framework.catalog`: ordering and execution of configured traits

Reusable, application-agnostic primitives live in `traitkit`.
"""
