"""Interfaces/abstracciones del Core.

Por qué:
- Define los contratos (Protocol) que implementan los adaptadores.
- El Core depende de estas abstracciones, nunca de un cliente concreto del store.
"""
