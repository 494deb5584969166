"""
Serving — FastAPI application exposing ingestion and chat over HTTP.
"""
