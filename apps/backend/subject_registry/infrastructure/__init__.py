"""Infraestructura: DB (pool) + repositorios (Postgres / InMemory)."""
