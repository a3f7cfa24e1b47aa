"""Interfaces/abstracciones del Core.

Por qué:
- Define el contrato (Protocol) que implementa el cliente HTTP de la API.
- Los servicios dependen de la abstracción, así se testean con un fake.
"""
