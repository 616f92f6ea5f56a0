"""
entitygen - import a domain model and generate its applications and entities
"""

__version__ = "1.0.0"
