"""
Integracion con Google Sheets (espejo best-effort de la tabla de usuarios).
"""
from .sheets_client import GoogleSheetsClient, USER_ENTERED, a1_range

__all__ = ["GoogleSheetsClient", "USER_ENTERED", "a1_range"]
