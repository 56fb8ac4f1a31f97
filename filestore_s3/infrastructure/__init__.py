"""Infraestructura: implementaciones concretas (boto3)."""
