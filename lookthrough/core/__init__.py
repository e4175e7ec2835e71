"""Exposure pipeline: services, roll-ups and the engine orchestrator."""
