"""
Release service: trigger adapters, background scheduler and HTTP API.
"""
