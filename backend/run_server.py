#!/usr/bin/env python3
"""
Launch script for Flight Graph Backend.

Usage:
    python run_server.py [--port PORT] [--host HOST] [--mode MODE] [--units UNITS]

Examples:
    python run_server.py                        # Vertical speed, metric
    python run_server.py --mode glide_ratio     # Start new graphs on glide ratio
    python run_server.py --port 5000            # Run on port 5000
"""

import argparse
import os
import sys
from pathlib import Path

# Add flightgraph to path
sys.path.insert(0, str(Path(__file__).parent))


MODES = ["horizontal_speed", "vertical_speed", "glide_ratio", "altitude"]
UNITS = ["metric", "imperial"]


def main():
    parser = argparse.ArgumentParser(description="Flight Graph Backend Server")
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--mode", "-m",
        choices=MODES,
        default=None,
        help="Default display mode for new graphs (default: vertical_speed)"
    )
    parser.add_argument(
        "--units", "-u",
        choices=UNITS,
        default=None,
        help="Default unit system for new graphs (default: metric)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )

    args = parser.parse_args()

    # Read by flightgraph.services.graph at import time
    if args.mode:
        os.environ["FLIGHTGRAPH_DEFAULT_MODE"] = args.mode
    if args.units:
        os.environ["FLIGHTGRAPH_DEFAULT_UNITS"] = args.units

    print("Flight Graph Backend")
    print("=" * 40)
    print(f"Server: http://{args.host}:{args.port}")
    print(f"Default mode: {os.getenv('FLIGHTGRAPH_DEFAULT_MODE', 'vertical_speed')}")
    print(f"Default units: {os.getenv('FLIGHTGRAPH_DEFAULT_UNITS', 'metric')}")
    print("=" * 40)

    print("\nAPI Endpoints:")
    print("  GET    /                        - Health check")
    print("  GET    /health                  - Detailed health")
    print("  POST   /graphs                  - Create a graph")
    print("  GET    /graphs                  - List graphs")
    print("  PUT    /graphs/{id}/records     - Load records")
    print("  POST   /graphs/{id}/demo        - Load a synthetic jump")
    print("  PUT    /graphs/{id}/mode        - Change mode/units")
    print("  POST   /graphs/{id}/wheel       - Wheel zoom")
    print("  POST   /graphs/{id}/pan         - Drag pan")
    print("  GET    /graphs/{id}/polyline    - Curve points")
    print("  GET    /graphs/{id}/hover       - Hover readout")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "flightgraph.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()
