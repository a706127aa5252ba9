"""Modelos y entidades del dominio.

Por qué:
- Aquí viven los datos puros del harness (peticiones, resultados, errores).
- El dominio no conoce HTTP, CLI, ni observers concretos: solo conceptos.
"""
