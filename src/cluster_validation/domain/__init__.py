"""
cluster-validation: domain package

File: src/cluster_validation/domain/__init__.py
Last updated: 2026-10-18

Purpose
- In-memory message types the validators operate on: typed IDs, secrets,
  environments, commands, volumes, containers and resources.

What should be included in this file
- Package docstring only; import concrete types from their modules.
- Keep the domain layer free of IO side effects.

Functional requirements
- Messages must be constructible in any state, including invalid ones, so the
  validators can reject them.

Non-functional requirements
- Domain layer should have minimal dependencies.
"""
