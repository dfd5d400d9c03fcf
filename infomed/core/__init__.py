"""
Core configuration and logging for the InfoMed admin console.
"""
