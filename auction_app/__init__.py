"""
Online auction API application package.
"""
