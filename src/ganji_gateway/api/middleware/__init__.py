"""HTTP middleware: API key auth, rate limiting, CORS."""
