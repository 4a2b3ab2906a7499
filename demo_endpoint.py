"""
Quick demo script to try the /api/recommend endpoint.

This script starts a local server and shows how to make requests to the endpoint.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Doctor Finder Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:  GET  http://localhost:8000/health")
    print("   - Recommend:     POST http://localhost:8000/api/recommend")
    print("   - API Docs:           http://localhost:8000/docs")
    print("   - ReDoc:              http://localhost:8000/redoc")
    print()
    print("🔑 Configuration:")
    print("   Set GOOGLE_API_KEY in your .env file before calling /api/recommend")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/api/recommend" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"symptoms": "fever and cough", "location": "Mumbai"}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "doctor_finder.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
