"""
Ollama test-generation client package.

Provides:
- A generation client for Ollama's /api/generate endpoint
- Pluggable transport (httpx) and response parser collaborators
- A CLI entry point and a FastAPI service wrapping the client
"""
