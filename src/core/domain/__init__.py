"""Modelos y entidades del dominio.

Por qué aquí:
- Estructuras de datos simples y estrictas (Pydantic v2) y sus colecciones.
- El dominio no sabe nada de HTTP, del store ni de la CLI.
"""
