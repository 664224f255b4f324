"""
Integrations Module

External service integrations. Currently only Google Tasks.
"""
