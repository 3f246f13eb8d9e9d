"""`traitkit` invariants and boundaries.

This module exists to make repository-wide refactors and boundary tests explicit.

Generic invariants:

1) `traitkit` must not import `integration_operator.*`.
2) `traitkit` provides reusable primitives: the string-valued config namespace and
   the Platform -> Kit -> Integration resolver, the trait contract and registry,
   and the phase-ordered build-step runner.
3) `traitkit` does not define project conventions like:
   - which profiles exist or how the active profile is chosen
   - which cluster object kinds exist in the resource collection
   - which concrete traits or build steps are registered by default

Project code should inject conventions via explicit objects implemented outside
this package.
"""
