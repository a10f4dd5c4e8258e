"""
Ambient infrastructure: configuration and structured logging.
"""
