"""Crosscutting: configuración, logging y métricas."""
