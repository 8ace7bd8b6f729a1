import sys
import uvicorn

from hr_approvals.main import app  # noqa: F401

def run_http(port: int = 9106):
    """Run HTTP server"""
    print(f"Starting HTTP server on port {port}...")
    uvicorn.run(
        "hr_approvals.main:app",  # Use string import
        host="0.0.0.0",
        port=port,
        reload=False
    )

if __name__ == "__main__":
    port = int(sys.argv[1]) if len(sys.argv) > 1 else 9106
    run_http(port)
