"""Rotation inputs: contract models and loaders."""
