"""Interfaces/abstracciones del Core.

Contratos estructurales (Protocol) que implementan comandos, observers,
estrategias de validación y loggers concretos.
"""
