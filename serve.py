"""
Local development server for the PrepChef data API.

Starts uvicorn with reload and prints the operational endpoints.
Reads SUPABASE_URL / SUPABASE_ANON_KEY from .env like the app itself.
"""

import uvicorn

from prepchef.config import settings

if __name__ == "__main__":
    print("=" * 60)
    print("Starting PrepChef Data API")
    print("=" * 60)
    print()
    print("📌 Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - Diagnostics:   GET  http://localhost:8000/health/diagnostics")
    print("   - API Docs:           http://localhost:8000/docs")
    print()
    missing = settings.missing()
    if missing:
        print(f"⚠️  Not configured: {', '.join(missing)} (diagnostics will report it)")
        print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "prepchef.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development(),
        log_level=settings.LOG_LEVEL.lower()
    )
