"""Diro court reservation API."""
