"""Scoring pipeline stages and the service that composes them.

Stages are plain functions over immutable inputs; ``RiskScoringService``
wires them together in order.
"""
