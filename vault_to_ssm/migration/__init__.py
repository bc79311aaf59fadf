"""Orchestration of the Vault to Parameter Store migration.

This package merges per-mount results and drives discovery, collection and
publishing from the command line.
"""
