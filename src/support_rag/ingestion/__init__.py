"""
Ingestion — website crawling, PDF loading, chunking, and storage.

This package converts raw sources (a website start URL, a PDF file) into
chunks stored in the vector database.
"""
